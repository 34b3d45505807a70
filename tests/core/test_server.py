"""Tests for the MCPServer facade."""

from __future__ import annotations

import json
import types
from unittest.mock import patch

import pytest

from mcpr.core.server import MCPServer, mcp
from mcpr.protocols.mcp.dispatcher import MCPDispatcher


def _make_module() -> types.ModuleType:
    mod = types.ModuleType("mathmod")

    def add(a: int, b: int) -> int:
        """Add two numbers.

        Longer explanation that is not part of the description.
        """
        return a + b

    def sub(a: int, b: int) -> int:
        return a - b

    def _private() -> None:
        pass

    for fn in (add, sub, _private):
        fn.__module__ = "mathmod"
        setattr(mod, fn.__name__, fn)
    mod.dumps = json.dumps  # type: ignore[attr-defined]
    return mod


class _RecordingTransport:
    def __init__(self) -> None:
        self.dispatcher: MCPDispatcher | None = None
        self.stopped = False

    def serve(self, dispatcher: MCPDispatcher) -> None:
        self.dispatcher = dispatcher

    def stop(self) -> None:
        self.stopped = True


class TestConstruction:
    def test_defaults(self) -> None:
        server = MCPServer()
        assert server.name == "mcpr-server"
        assert server.version == "0.1.0"
        assert server.debug is False

    def test_factory(self) -> None:
        server = mcp("math", "2.0.0", debug=True)
        assert (server.name, server.version, server.debug) == ("math", "2.0.0", True)

    def test_repr(self) -> None:
        server = mcp("math")
        server.add_prompt("p", "t")
        assert repr(server) == (
            "MCPServer(name='math', version='0.1.0', tools=0, resources=0, prompts=1)"
        )


class TestRegistration:
    def test_add_tool_infers_metadata(self) -> None:
        def multiply(x: float, y: float = 1.0) -> float:
            """Multiply numbers."""
            return x * y

        server = MCPServer()
        server.add_tool(multiply)

        tool = server.registry.get_tool("multiply")
        assert tool.description == "Multiply numbers."
        assert tool.input_schema["required"] == ["x"]
        assert tool.input_schema["properties"]["x"]["type"] == "number"

    def test_add_tool_explicit_metadata(self) -> None:
        schema = {"type": "object", "properties": {"q": {"type": "string"}}}
        server = MCPServer().add_tool(lambda q: q, name="echo", description="Echo", schema=schema)

        tool = server.registry.get_tool("echo")
        assert tool.description == "Echo"
        assert tool.input_schema == schema

    def test_add_tool_rejects_non_callable(self) -> None:
        with pytest.raises(TypeError, match="callable"):
            MCPServer().add_tool("not a function")  # type: ignore[arg-type]

    def test_tool_decorator_returns_function(self) -> None:
        server = MCPServer()

        @server.tool(description="Square")
        def square(n: int) -> int:
            return n * n

        assert square(3) == 9
        assert server.registry.get_tool("square").description == "Square"

    def test_resource_decorator(self) -> None:
        server = MCPServer()

        @server.resource(name="settings", mime_type="application/json")
        def load_settings() -> dict[str, int]:
            """Application settings."""
            return {"a": 1}

        resource = server.registry.get_resource("settings")
        assert resource.description == "Application settings."
        assert resource.mime_type == "application/json"

    def test_add_resource_rejects_non_callable(self) -> None:
        with pytest.raises(TypeError):
            MCPServer().add_resource(42)  # type: ignore[arg-type]

    def test_chaining(self) -> None:
        server = (
            MCPServer()
            .add_tool(lambda: 1, name="one")
            .add_resource(lambda: "r", name="res")
            .add_prompt("p", "Hi {x}", arguments={"x": "Name"})
        )
        assert len(server.registry) == 3


class TestExposeModule:
    def test_public_functions_only(self) -> None:
        server = MCPServer().expose_module(_make_module())
        names = [t.name for t in server.registry.list_tools()]
        assert sorted(names) == ["mathmod.add", "mathmod.sub"]

    def test_descriptions(self) -> None:
        server = MCPServer().expose_module(_make_module())
        assert server.registry.get_tool("mathmod.add").description == "Add two numbers."
        assert (
            server.registry.get_tool("mathmod.sub").description
            == "Function sub from module mathmod"
        )

    def test_include_exclude(self) -> None:
        included = MCPServer().expose_module(_make_module(), include=["a*"])
        assert [t.name for t in included.registry.list_tools()] == ["mathmod.add"]

        excluded = MCPServer().expose_module(_make_module(), exclude=["s?b"])
        assert [t.name for t in excluded.registry.list_tools()] == ["mathmod.add"]

    def test_exposed_tool_callable(self) -> None:
        server = MCPServer().expose_module(_make_module())
        assert server.registry.get_tool("mathmod.sub").invoke({"a": 5, "b": 2}) == 3


class TestRun:
    def test_invalid_transport(self) -> None:
        with pytest.raises(ValueError, match="Invalid transport: carrier-pigeon"):
            MCPServer().run("carrier-pigeon")

    def test_custom_transport(self) -> None:
        server = MCPServer("svc", debug=True)
        transport = _RecordingTransport()

        server.run(transport)

        assert isinstance(transport.dispatcher, MCPDispatcher)
        assert transport.dispatcher.server_info.name == "svc"
        assert transport.dispatcher.registry is server.registry

    def test_stdio(self) -> None:
        with patch("mcpr.core.server.StdioTransport") as mock_stdio:
            MCPServer().run("stdio")
        mock_stdio.return_value.serve.assert_called_once()

    def test_http(self) -> None:
        with patch("mcpr.protocols.mcp.http.HttpTransport") as mock_http:
            MCPServer().run("http", host="0.0.0.0", port=9000)
        mock_http.assert_called_once_with("0.0.0.0", 9000, log_level="info")
        mock_http.return_value.serve.assert_called_once()

    def test_stop_delegates_while_serving(self) -> None:
        server = MCPServer()

        class _StopsItself(_RecordingTransport):
            def serve(self, dispatcher: MCPDispatcher) -> None:
                server.stop()

        transport = _StopsItself()
        server.run(transport)
        assert transport.stopped

    def test_stop_when_idle(self) -> None:
        MCPServer().stop()
