"""Server configuration — the YAML/JSON file consumed by ``mcpr serve``.

Example::

    name: math-server
    version: 1.2.0
    target: examples/math_tools.py:server
    transport: http
    port: ${MCPR_PORT}
    logging:
      level: debug
      file: /tmp/mcpr.log
"""

from __future__ import annotations

import json
import os
from pathlib import Path  # noqa: TC003
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from mcpr.sdk.errors import ConfigValidationError


class LoggingSettings(BaseModel):
    """Where and how verbosely the ``mcpr`` logger writes."""

    level: Literal["debug", "info", "warn", "warning", "error"] = "info"
    file: str | None = None


class TelemetrySettings(BaseModel):
    """Optional telemetry configuration."""

    enabled: bool = False
    otlp_endpoint: str | None = None


class ServerConfig(BaseModel):
    """Top-level server configuration."""

    name: str | None = None
    version: str | None = None
    target: str | None = None
    transport: Literal["stdio", "http"] = "stdio"
    host: str = "127.0.0.1"
    port: int = Field(default=8080, ge=0, le=65535)
    debug: bool = False
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)

    def merged(self, **overrides: Any) -> ServerConfig:
        """Return a copy with every non-``None`` override applied."""
        return self.model_copy(update={k: v for k, v in overrides.items() if v is not None})


class ConfigLoader:
    """Load and validate a config file into a :class:`ServerConfig`."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> ServerConfig:
        """Read the file, interpolate env vars, and validate.

        ``.json`` files are parsed as JSON, everything else as YAML.
        Environment variables in the form ``${VAR}`` or ``$VAR`` are expanded
        with :func:`os.path.expandvars` before parsing.

        Raises:
            ConfigValidationError: On read, parse or schema validation failures.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigValidationError(f"Cannot read {self._path}: {exc}") from exc

        expanded = os.path.expandvars(raw)

        data: Any
        if self._path.suffix.lower() == ".json":
            try:
                data = json.loads(expanded)
            except ValueError as exc:
                raise ConfigValidationError(f"JSON parse error: {exc}") from exc
        else:
            try:
                data = yaml.safe_load(expanded)
            except yaml.YAMLError as exc:
                raise ConfigValidationError(f"YAML parse error: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigValidationError("Config file must be a mapping")

        try:
            return ServerConfig.model_validate(data)
        except ValidationError as exc:
            raise ConfigValidationError(str(exc)) from exc
