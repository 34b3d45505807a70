"""MCPServer — register Python callables and serve them over MCP.

Typical usage::

    server = mcp(name="math", version="1.0.0")

    @server.tool(description="Add two numbers")
    def add(a: float, b: float) -> float:
        return a + b

    server.add_prompt("greet", "Hello {name}", arguments={"name": "Who to greet"})
    server.run("stdio")
"""

from __future__ import annotations

import fnmatch
import inspect
import logging
from collections.abc import Callable
from types import ModuleType
from typing import Any, TypeVar

from mcpr.core.registry import CapabilityRegistry
from mcpr.core.schema import infer_input_schema
from mcpr.core.serialization import SerializerRegistry
from mcpr.protocols.mcp.dispatcher import MCPDispatcher
from mcpr.protocols.mcp.models import ServerInfo
from mcpr.protocols.mcp.transport import MCPTransport, StdioTransport

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

TRANSPORTS = ("stdio", "http")


def _first_doc_line(fn: Callable[..., Any]) -> str:
    doc = inspect.getdoc(fn)
    return doc.strip().splitlines()[0] if doc else ""


class MCPServer:
    """One registry of tools, resources and prompts plus the server identity.

    Registration methods return the server so calls can be chained.
    """

    def __init__(
        self,
        name: str | None = None,
        version: str | None = None,
        *,
        debug: bool = False,
    ) -> None:
        self.info = ServerInfo(name=name or "mcpr-server", version=version or "0.1.0")
        self.registry = CapabilityRegistry()
        self.serializers = SerializerRegistry()
        self.debug = debug
        self._transport: MCPTransport | None = None

    @property
    def name(self) -> str:
        return self.info.name

    @property
    def version(self) -> str:
        return self.info.version

    # -- registration -------------------------------------------------------

    def add_tool(
        self,
        fn: Callable[..., Any],
        name: str | None = None,
        description: str | None = None,
        schema: dict[str, Any] | None = None,
    ) -> MCPServer:
        """Register *fn* as a tool; the schema is inferred from its signature if omitted."""
        if not callable(fn):
            msg = "Tool must be a callable"
            raise TypeError(msg)
        tool_name = name or fn.__name__
        self.registry.register_tool(
            tool_name,
            description if description is not None else _first_doc_line(fn),
            schema if schema is not None else infer_input_schema(fn),
            fn,
        )
        logger.debug("Registered tool %s", tool_name)
        return self

    def add_resource(
        self,
        fn: Callable[[], Any],
        name: str | None = None,
        description: str | None = None,
        mime_type: str = "text/plain",
    ) -> MCPServer:
        """Register *fn* as a resource; its name is also its URI."""
        if not callable(fn):
            msg = "Resource must be a callable"
            raise TypeError(msg)
        resource_name = name or fn.__name__
        self.registry.register_resource(
            resource_name,
            description if description is not None else _first_doc_line(fn),
            mime_type,
            fn,
        )
        logger.debug("Registered resource %s", resource_name)
        return self

    def add_prompt(
        self,
        name: str,
        template: str,
        description: str = "",
        arguments: dict[str, str] | None = None,
    ) -> MCPServer:
        """Register a prompt template with ``{placeholder}`` tokens."""
        self.registry.register_prompt(name, description, template, arguments)
        logger.debug("Registered prompt %s", name)
        return self

    def tool(
        self,
        name: str | None = None,
        description: str | None = None,
        schema: dict[str, Any] | None = None,
    ) -> Callable[[F], F]:
        """Decorator form of :meth:`add_tool`.  Returns the function unchanged."""

        def decorator(fn: F) -> F:
            self.add_tool(fn, name=name, description=description, schema=schema)
            return fn

        return decorator

    def resource(
        self,
        name: str | None = None,
        description: str | None = None,
        mime_type: str = "text/plain",
    ) -> Callable[[F], F]:
        """Decorator form of :meth:`add_resource`."""

        def decorator(fn: F) -> F:
            self.add_resource(fn, name=name, description=description, mime_type=mime_type)
            return fn

        return decorator

    def expose_module(
        self,
        module: ModuleType,
        include: list[str] | None = None,
        exclude: list[str] | None = None,
    ) -> MCPServer:
        """Register every public function defined in *module* as a tool.

        Tools are named ``<module>.<function>``.  *include* and *exclude* are
        glob patterns matched against the bare function name.
        """
        prefix = module.__name__
        for fn_name, fn in inspect.getmembers(module, inspect.isfunction):
            if fn_name.startswith("_") or fn.__module__ != prefix:
                continue
            if include and not any(fnmatch.fnmatch(fn_name, p) for p in include):
                continue
            if exclude and any(fnmatch.fnmatch(fn_name, p) for p in exclude):
                continue
            self.add_tool(
                fn,
                name=f"{prefix}.{fn_name}",
                description=_first_doc_line(fn) or f"Function {fn_name} from module {prefix}",
            )
        return self

    # -- serving ------------------------------------------------------------

    def dispatcher(self) -> MCPDispatcher:
        return MCPDispatcher(
            self.registry, self.info, serializer=self.serializers, debug=self.debug
        )

    def run(
        self,
        transport: str | MCPTransport = "stdio",
        host: str = "127.0.0.1",
        port: int = 8080,
        *,
        log_level: str = "info",
    ) -> None:
        """Serve until the transport's loop ends.

        *transport* is ``"stdio"``, ``"http"`` or an :class:`MCPTransport`.
        """
        if isinstance(transport, str):
            if transport not in TRANSPORTS:
                msg = f"Invalid transport: {transport}. Must be one of: {', '.join(TRANSPORTS)}"
                raise ValueError(msg)
            if transport == "stdio":
                self._transport = StdioTransport()
            else:
                from mcpr.protocols.mcp.http import HttpTransport

                self._transport = HttpTransport(host, port, log_level=log_level)
        else:
            self._transport = transport

        try:
            self._transport.serve(self.dispatcher())
        finally:
            self._transport = None

    def stop(self) -> None:
        if self._transport is not None:
            self._transport.stop()

    def __repr__(self) -> str:
        return (
            f"MCPServer(name={self.name!r}, version={self.version!r}, "
            f"tools={len(self.registry.list_tools())}, "
            f"resources={len(self.registry.list_resources())}, "
            f"prompts={len(self.registry.list_prompts())})"
        )


def mcp(name: str | None = None, version: str | None = None, *, debug: bool = False) -> MCPServer:
    """Create a new :class:`MCPServer`."""
    return MCPServer(name=name, version=version, debug=debug)
