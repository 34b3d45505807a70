"""``mcpr inspect`` — list what a server target registers."""

from __future__ import annotations

import sys

import click

from mcpr.cli_commands._output import console, print_capabilities


@click.command("inspect")
@click.argument("target")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def inspect_cmd(target: str, as_json: bool) -> None:
    """Show the tools, resources and prompts of a server.

    TARGET is ``package.module:attr`` or ``path/to/file.py:attr``
    (``attr`` defaults to ``server``).
    """
    from mcpr.sdk.loader import load_server

    try:
        server = load_server(target)
    except Exception as exc:
        console.print(f"[red]Error loading server:[/red] {exc}")
        sys.exit(1)

    print_capabilities(server, as_json=as_json)
