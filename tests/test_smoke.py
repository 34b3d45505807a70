"""Smoke test to verify the project scaffolding works."""

from __future__ import annotations


def test_import() -> None:
    import mcpr

    assert mcpr.__version__ == "0.1.0"


def test_cli_entrypoint() -> None:
    from mcpr.cli import main

    assert callable(main)


def test_sdk_imports() -> None:
    from mcpr.sdk import (
        ConfigLoader,
        ConfigValidationError,
        ServerConfig,
        TargetLoadError,
        load_server,
    )

    assert ConfigLoader is not None
    assert ServerConfig is not None
    assert ConfigValidationError is not None
    assert TargetLoadError is not None
    assert callable(load_server)


def test_lazy_import_from_mcpr() -> None:
    import mcpr
    from mcpr.core.server import MCPServer

    assert mcpr.MCPServer is MCPServer
    assert isinstance(mcpr.mcp("x"), MCPServer)
