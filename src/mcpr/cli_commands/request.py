"""``mcpr request`` — send one JSON-RPC call and print the response."""

from __future__ import annotations

import json
import sys
from typing import Any

import click

from mcpr.cli_commands._output import console, print_envelope


@click.command()
@click.argument("method")
@click.option("--params", default=None, help="JSON object with the call parameters.")
@click.option("--id", "request_id", default="1", help="Request id (omit with --notify).")
@click.option("--notify", is_flag=True, help="Send as a notification (no id).")
@click.option("--target", default=None, help="Server target to call in-process.")
@click.option("--url", default=None, help="Base URL of a running HTTP server.")
@click.option("--timeout", type=float, default=30.0, help="HTTP timeout in seconds.")
def request(
    method: str,
    params: str | None,
    request_id: str,
    notify: bool,
    target: str | None,
    url: str | None,
    timeout: float,
) -> None:
    """Call METHOD on a server, in-process (--target) or over HTTP (--url)."""
    if (target is None) == (url is None):
        console.print("[red]Pass exactly one of --target or --url.[/red]")
        sys.exit(2)

    message: dict[str, Any] = {"jsonrpc": "2.0", "method": method}
    if not notify:
        message["id"] = int(request_id) if request_id.isdigit() else request_id
    if params is not None:
        try:
            message["params"] = json.loads(params)
        except ValueError as exc:
            console.print(f"[red]Invalid --params JSON:[/red] {exc}")
            sys.exit(2)

    body = json.dumps(message)
    if target is not None:
        reply = _call_in_process(target, body)
    else:
        assert url is not None
        reply = _call_http(url, body, timeout)

    if reply is None:
        console.print("[yellow]No response (notification).[/yellow]")
        return
    print_envelope(reply)


def _call_in_process(target: str, body: str) -> dict[str, Any] | None:
    from mcpr.sdk.loader import load_server

    try:
        server = load_server(target)
    except Exception as exc:
        console.print(f"[red]Error loading server:[/red] {exc}")
        sys.exit(1)

    line = server.dispatcher().dispatch(body)
    return json.loads(line) if line is not None else None


def _call_http(url: str, body: str, timeout: float) -> dict[str, Any] | None:
    import httpx

    endpoint = url.rstrip("/")
    if not endpoint.endswith("/mcp"):
        endpoint += "/mcp"

    try:
        response = httpx.post(
            endpoint,
            content=body,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )
    except httpx.HTTPError as exc:
        console.print(f"[red]Request error:[/red] {exc}")
        sys.exit(1)

    if response.status_code == 202 or not response.content:
        return None
    try:
        return response.json()  # type: ignore[no-any-return]
    except ValueError:
        console.print(f"[red]Unexpected HTTP {response.status_code} response:[/red] {response.text}")
        sys.exit(1)
