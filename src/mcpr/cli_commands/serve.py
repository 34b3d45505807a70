"""``mcpr serve`` — run a server target over stdio or HTTP."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from mcpr.cli_commands._output import err_console


@click.command()
@click.argument("target", required=False)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML or JSON server config file.",
)
@click.option(
    "--transport",
    type=click.Choice(["stdio", "http"]),
    default=None,
    help="Transport to serve on (default: stdio).",
)
@click.option("--host", default=None, help="HTTP bind address.")
@click.option("--port", type=int, default=None, help="HTTP port.")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default=None,
    help="Logging verbosity.",
)
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Log to this file.")
@click.option("--debug", is_flag=True, help="Include error details in responses.")
@click.option("--telemetry", is_flag=True, help="Enable OpenTelemetry tracing.")
def serve(
    target: str | None,
    config_file: str | None,
    transport: str | None,
    host: str | None,
    port: int | None,
    log_level: str | None,
    log_file: str | None,
    debug: bool,
    telemetry: bool,
) -> None:
    """Serve the MCP server named by TARGET.

    TARGET is ``package.module:attr`` or ``path/to/file.py:attr``; it may
    also come from the config file.  On stdio nothing but protocol messages
    is written to stdout, and logging is off unless --log-file is given.
    """
    from mcpr.sdk.config import ConfigLoader, ServerConfig
    from mcpr.sdk.loader import load_server
    from mcpr.utils.logging import configure_logging

    try:
        config = ConfigLoader(Path(config_file)).load() if config_file else ServerConfig()
    except Exception as exc:
        err_console.print(f"[red]Config error:[/red] {exc}")
        sys.exit(1)

    config = config.merged(
        target=target, transport=transport, host=host, port=port, debug=debug or None
    )
    if log_level is not None:
        config.logging.level = log_level  # type: ignore[assignment]
    if log_file is not None:
        config.logging.file = log_file
    if telemetry:
        config.telemetry.enabled = True

    if not config.target:
        err_console.print("[red]No target given:[/red] pass TARGET or set 'target' in --config")
        sys.exit(2)

    stdio = config.transport == "stdio"
    configure_logging(config.logging.level, log_file=config.logging.file, quiet=stdio)

    try:
        server = load_server(config.target)
    except Exception as exc:
        err_console.print(f"[red]Error loading server:[/red] {exc}")
        sys.exit(1)

    if config.name:
        server.info = server.info.model_copy(update={"name": config.name})
    if config.version:
        server.info = server.info.model_copy(update={"version": config.version})
    if config.debug:
        server.debug = True

    if config.telemetry.enabled:
        from mcpr.utils.telemetry import configure_telemetry

        configure_telemetry(
            service_name=server.name,
            export_to_console=not stdio,
            otlp_endpoint=config.telemetry.otlp_endpoint,
        )

    level = "warning" if config.logging.level == "warn" else config.logging.level
    server.run(config.transport, host=config.host, port=config.port, log_level=level)
