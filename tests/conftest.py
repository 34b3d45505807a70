"""Shared fixtures: a small demo server and a JSON-RPC call helper."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import pytest

from mcpr.core.server import MCPServer
from mcpr.protocols.mcp.dispatcher import MCPDispatcher

RpcCall = Callable[..., "dict[str, Any] | None"]


def build_demo_server(*, debug: bool = False) -> MCPServer:
    """A server with one working tool, one failing tool, a resource and a prompt."""
    server = MCPServer("demo", "1.0.0", debug=debug)

    @server.tool(description="Add two numbers")
    def add(a: int, b: int) -> int:
        return a + b

    @server.tool(description="Always fails")
    def boom() -> None:
        raise ValueError("kaboom")

    @server.resource(name="config", description="Static config", mime_type="application/json")
    def config() -> dict[str, Any]:
        return {"debug": False}

    server.add_prompt(
        "greet", "Hello {name}", description="Greeting", arguments={"name": "Who to greet"}
    )
    return server


@pytest.fixture
def demo_server() -> MCPServer:
    return build_demo_server()


@pytest.fixture
def dispatcher(demo_server: MCPServer) -> MCPDispatcher:
    return demo_server.dispatcher()


@pytest.fixture
def call(dispatcher: MCPDispatcher) -> RpcCall:
    """Send one request through the dispatcher and return the decoded reply."""

    def _call(
        method: str, params: dict[str, Any] | None = None, request_id: Any = 1
    ) -> dict[str, Any] | None:
        message: dict[str, Any] = {"jsonrpc": "2.0", "id": request_id, "method": method}
        if params is not None:
            message["params"] = params
        reply = dispatcher.dispatch(json.dumps(message))
        return json.loads(reply) if reply is not None else None

    return _call
