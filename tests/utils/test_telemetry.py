"""Tests for OpenTelemetry tracing helpers."""

from __future__ import annotations

import sys
from unittest.mock import MagicMock, patch

import pytest
from opentelemetry import trace

from mcpr.utils.telemetry import (
    ATTR_METHOD,
    ATTR_TOOL_NAME,
    _add_console_exporter,
    configure_telemetry,
    get_tracer,
)


class TestGetTracer:
    def test_returns_tracer(self) -> None:
        tracer = get_tracer("test.module")
        assert isinstance(tracer, trace.Tracer)

    def test_default_name(self) -> None:
        tracer = get_tracer()
        assert isinstance(tracer, trace.Tracer)

    def test_noop_span(self) -> None:
        """Without SDK configured, spans should be no-ops."""
        tracer = get_tracer("test.noop")
        with tracer.start_as_current_span("test") as span:
            span.set_attribute(ATTR_METHOD, "tools/list")


class TestConfigureTelemetry:
    def test_raises_without_sdk(self) -> None:
        """configure_telemetry requires opentelemetry-sdk."""
        with patch.dict("sys.modules", {"opentelemetry.sdk.resources": None}):
            with pytest.raises(ImportError, match="opentelemetry-sdk"):
                configure_telemetry()

    def test_installs_provider(self) -> None:
        try:
            from opentelemetry.sdk.trace import TracerProvider
        except ImportError:
            pytest.skip("opentelemetry-sdk not installed")

        with patch("mcpr.utils.telemetry.trace.set_tracer_provider") as mock_set:
            configure_telemetry(service_name="test-svc", export_to_console=False)

        (provider,) = mock_set.call_args.args
        assert isinstance(provider, TracerProvider)
        assert provider.resource.attributes["service.name"] == "test-svc"

    def test_console_exporter_writes_to_stderr(self) -> None:
        try:
            from opentelemetry.sdk.trace.export import SimpleSpanProcessor
        except ImportError:
            pytest.skip("opentelemetry-sdk not installed")

        provider = MagicMock()
        _add_console_exporter(provider, SimpleSpanProcessor)

        (processor,) = provider.add_span_processor.call_args.args
        assert processor.span_exporter.out is sys.stderr

    def test_otlp_raises_without_exporter(self) -> None:
        """OTLP export requires opentelemetry-exporter-otlp."""
        try:
            import opentelemetry.sdk.trace  # noqa: F401
        except ImportError:
            pytest.skip("opentelemetry-sdk not installed")

        with patch.dict(
            "sys.modules",
            {"opentelemetry.exporter.otlp.proto.grpc.trace_exporter": None},
        ):
            with pytest.raises(ImportError, match="opentelemetry-exporter-otlp"):
                configure_telemetry(
                    export_to_console=False,
                    otlp_endpoint="http://localhost:4317",
                )


class TestAttributeConstants:
    def test_constants_are_strings(self) -> None:
        assert isinstance(ATTR_METHOD, str)
        assert ATTR_TOOL_NAME.startswith("mcp.")
