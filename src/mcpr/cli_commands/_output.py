"""Shared CLI output formatters."""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.table import Table

from mcpr.core.server import MCPServer  # noqa: TC001

console = Console()
# stdout belongs to the protocol while ``mcpr serve`` runs on stdio.
err_console = Console(stderr=True)


def capabilities_summary(server: MCPServer) -> dict[str, Any]:
    """Plain-data view of everything *server* registers."""
    registry = server.registry
    return {
        "name": server.name,
        "version": server.version,
        "tools": [
            {"name": t.name, "description": t.description, "inputSchema": t.input_schema}
            for t in registry.list_tools()
        ],
        "resources": [
            {"uri": r.name, "description": r.description, "mimeType": r.mime_type}
            for r in registry.list_resources()
        ],
        "prompts": [
            {"name": p.name, "description": p.description, "arguments": list(p.arguments)}
            for p in registry.list_prompts()
        ],
    }


def print_capabilities(server: MCPServer, *, as_json: bool = False) -> None:
    """Pretty-print the tools, resources and prompts of *server*."""
    summary = capabilities_summary(server)
    if as_json:
        console.print_json(json.dumps(summary, default=str))
        return

    console.print(f"\n[bold]MCP Server:[/bold] {server.name} (v{server.version})")

    if summary["tools"]:
        table = Table(title="Tools")
        table.add_column("Name", style="cyan")
        table.add_column("Description")
        table.add_column("Parameters")
        for tool in summary["tools"]:
            params = ", ".join(tool["inputSchema"].get("properties", {})) or "-"
            table.add_row(tool["name"], _truncate(tool["description"]), params)
        console.print(table)

    if summary["resources"]:
        table = Table(title="Resources")
        table.add_column("URI", style="cyan")
        table.add_column("MIME type")
        table.add_column("Description")
        for res in summary["resources"]:
            table.add_row(res["uri"], res["mimeType"], _truncate(res["description"]))
        console.print(table)

    if summary["prompts"]:
        table = Table(title="Prompts")
        table.add_column("Name", style="cyan")
        table.add_column("Arguments")
        table.add_column("Description")
        for prompt in summary["prompts"]:
            table.add_row(
                prompt["name"], ", ".join(prompt["arguments"]) or "-", _truncate(prompt["description"])
            )
        console.print(table)

    if not (summary["tools"] or summary["resources"] or summary["prompts"]):
        console.print("[yellow]No tools, resources or prompts registered.[/yellow]")


def print_envelope(envelope: dict[str, Any]) -> None:
    """Print a JSON-RPC response envelope."""
    console.print_json(json.dumps(envelope))


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
