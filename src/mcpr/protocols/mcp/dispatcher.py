"""MCPDispatcher — routes JSON-RPC messages to the fixed MCP method set.

Every inbound message goes through the same steps::

    decode -> validate -> route -> execute -> respond | suppress

Handler failures never escape :meth:`MCPDispatcher.handle`; each one becomes
one of the response shapes below.

- ``tools/call`` and ``resources/read``: unknown names and handler errors are
  returned as *successful* responses with the error text in the payload
  (``isError: true`` for tools).  This holds on every transport.
- ``prompts/get``: an unknown prompt is a JSON-RPC ``-32601`` error.
- Anything else raised while routing is a ``-32603`` internal error whose
  detail is only included when the dispatcher runs with ``debug=True``.

Notifications (no ``id``) never get a response, with one exception: a
message the codec cannot decode, or one with a bad ``jsonrpc`` version,
is answered with an ``id: null`` error.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

from opentelemetry import trace

from mcpr.core.registry import CapabilityRegistry
from mcpr.core.serialization import SerializerRegistry, deserialize, serialize
from mcpr.protocols.errors import (
    InternalError,
    InvalidRequestError,
    MethodNotFoundError,
    NotFoundError,
    ProtocolError,
)
from mcpr.protocols.mcp.codec import decode, encode
from mcpr.protocols.mcp.models import (
    PROTOCOL_VERSION,
    JsonRpcRequest,
    JsonRpcResponse,
    MCPPromptArgument,
    MCPPromptDef,
    MCPResourceDef,
    MCPToolDef,
    ServerInfo,
    TextContent,
)
from mcpr.utils.telemetry import (
    ATTR_ERROR_CODE,
    ATTR_METHOD,
    ATTR_NOTIFICATION,
    ATTR_PROMPT_NAME,
    ATTR_REQUEST_ID,
    ATTR_RESOURCE_URI,
    ATTR_TOOL_NAME,
    get_tracer,
)

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

MethodHandler = Callable[[dict[str, Any]], Any]

# Methods whose messages never get a response, whatever the envelope says.
_ALWAYS_SILENT = frozenset({"initialized"})


class MCPDispatcher:
    """Stateless per-message router over one :class:`CapabilityRegistry`.

    Usage::

        dispatcher = MCPDispatcher(registry, ServerInfo(name="demo"))
        line = dispatcher.dispatch('{"jsonrpc":"2.0","id":1,"method":"tools/list"}')
        # '{"jsonrpc":"2.0","id":1,"result":{"tools":[]}}'

    Safe to share between threads: the only state is the registry, which
    synchronizes its own access.
    """

    def __init__(
        self,
        registry: CapabilityRegistry,
        server_info: ServerInfo | None = None,
        *,
        serializer: SerializerRegistry | None = None,
        debug: bool = False,
    ) -> None:
        self._registry = registry
        self._server_info = server_info or ServerInfo()
        self._serializer = serializer or SerializerRegistry()
        self._debug = debug
        self._routes: dict[str, MethodHandler] = {
            "initialize": self._initialize,
            "initialized": self._initialized,
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
            "resources/list": self._resources_list,
            "resources/read": self._resources_read,
            "prompts/list": self._prompts_list,
            "prompts/get": self._prompts_get,
        }

    @property
    def registry(self) -> CapabilityRegistry:
        return self._registry

    @property
    def server_info(self) -> ServerInfo:
        return self._server_info

    @property
    def methods(self) -> list[str]:
        """The method names this dispatcher routes, in table order."""
        return list(self._routes)

    # -- entry points -------------------------------------------------------

    def dispatch(self, raw: bytes | str) -> str | None:
        """Decode, handle and encode one message; ``None`` means no reply."""
        response = self.handle_raw(raw)
        if response is None:
            return None
        return self.encode(response)

    def encode(self, response: JsonRpcResponse) -> str:
        """Encode *response*; a result that is not valid JSON becomes -32603."""
        try:
            return encode(response)
        except (TypeError, ValueError) as exc:
            logger.exception("Failed to encode response for id %r", response.id)
            return encode(self._internal_error(response.id, exc))

    def handle_raw(self, raw: bytes | str) -> JsonRpcResponse | None:
        """Decode *raw* and handle it.  Codec failures answer with ``id: null``."""
        try:
            request = decode(raw)
        except ProtocolError as exc:
            logger.warning("Rejected message: %s", exc)
            return JsonRpcResponse.failure(None, exc.code, exc.default_message, data=str(exc))
        return self.handle(request)

    def handle(self, request: JsonRpcRequest) -> JsonRpcResponse | None:
        """Validate, route and execute one decoded request."""
        with _tracer.start_as_current_span("mcp.dispatch") as span:
            span.set_attribute(ATTR_METHOD, request.method)
            span.set_attribute(ATTR_NOTIFICATION, request.is_notification)
            if request.id is not None:
                span.set_attribute(ATTR_REQUEST_ID, str(request.id))

            if request.jsonrpc != "2.0":
                err = InvalidRequestError("Invalid Request: missing or invalid jsonrpc version")
                span.set_attribute(ATTR_ERROR_CODE, err.code)
                return JsonRpcResponse.failure(
                    request.id, err.code, err.default_message, data=str(err)
                )

            response = self._execute(request)
            if response.error is not None:
                span.set_attribute(ATTR_ERROR_CODE, response.error.code)

            if request.is_notification or request.method in _ALWAYS_SILENT:
                logger.debug("Suppressed response to notification %s", request.method)
                return None
            return response

    # -- routing ------------------------------------------------------------

    def _execute(self, request: JsonRpcRequest) -> JsonRpcResponse:
        handler = self._routes.get(request.method)
        if handler is None:
            err = MethodNotFoundError(request.method)
            logger.warning("%s", err)
            return JsonRpcResponse.failure(
                request.id, err.code, err.default_message, data=request.method
            )

        params = request.params or {}
        logger.debug("Processing method: %s (id: %s)", request.method, request.id)
        try:
            result = handler(params)
        except NotFoundError as exc:
            logger.warning("Method %s failed: %s", request.method, exc)
            return JsonRpcResponse.failure(
                request.id, exc.code, MethodNotFoundError.default_message, data=str(exc)
            )
        except ProtocolError as exc:
            logger.warning("Method %s rejected: %s", request.method, exc)
            return JsonRpcResponse.failure(
                request.id, exc.code, exc.default_message, data=str(exc)
            )
        except Exception as exc:
            logger.exception("Internal error while handling %s", request.method)
            return self._internal_error(request.id, exc)
        return JsonRpcResponse.success(request.id, result)

    def _internal_error(self, request_id: int | str | None, exc: Exception) -> JsonRpcResponse:
        data = f"{type(exc).__name__}: {exc}" if self._debug else None
        return JsonRpcResponse.failure(
            request_id, InternalError.code, InternalError.default_message, data=data
        )

    def _to_text(self, value: Any) -> str:
        """Render a handler result as text: strings verbatim, else serialized JSON."""
        if isinstance(value, str):
            return value
        return json.dumps(serialize(value, self._serializer), allow_nan=False)

    # -- lifecycle ----------------------------------------------------------

    def _initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        client = params.get("clientInfo") or {}
        if client:
            logger.info("Client connected: %s %s", client.get("name"), client.get("version"))
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": self._registry.capabilities(),
            "serverInfo": self._server_info.model_dump(),
        }

    def _initialized(self, params: dict[str, Any]) -> None:
        return None

    # -- tools --------------------------------------------------------------

    def _tools_list(self, params: dict[str, Any]) -> dict[str, Any]:
        tools = [
            MCPToolDef(
                name=t.name, description=t.description, input_schema=t.input_schema
            ).model_dump(by_alias=True)
            for t in self._registry.list_tools()
        ]
        return {"tools": tools}

    def _tools_call(self, params: dict[str, Any]) -> dict[str, Any]:
        name = params.get("name")
        arguments = params.get("arguments") or {}
        _annotate(ATTR_TOOL_NAME, name)
        logger.info("Executing tool: %s", name)

        try:
            if not isinstance(arguments, dict):
                msg = "'arguments' must be an object"
                raise TypeError(msg)
            tool = self._registry.get_tool(str(name))
            text = self._to_text(tool.invoke(deserialize(arguments, self._serializer)))
        except Exception as exc:
            logger.error("Tool execution failed: %s: %s", name, exc)
            return {
                "isError": True,
                "content": [TextContent(text=f"Error executing tool: {exc}").model_dump()],
            }
        return {"content": [TextContent(text=text).model_dump()]}

    # -- resources ----------------------------------------------------------

    def _resources_list(self, params: dict[str, Any]) -> dict[str, Any]:
        resources = [
            MCPResourceDef(
                uri=r.name, name=r.name, description=r.description, mime_type=r.mime_type
            ).model_dump(by_alias=True)
            for r in self._registry.list_resources()
        ]
        return {"resources": resources}

    def _resources_read(self, params: dict[str, Any]) -> dict[str, Any]:
        uri = params.get("uri")
        _annotate(ATTR_RESOURCE_URI, uri)

        try:
            resource = self._registry.get_resource(str(uri))
            content = resource.fetch()
            if isinstance(content, (bytes, bytearray)):
                text = bytes(content).decode("utf-8", errors="replace")
            else:
                text = self._to_text(content)
        except Exception as exc:
            logger.error("Resource read failed: %s: %s", uri, exc)
            return {
                "contents": [
                    {
                        "uri": uri,
                        "mimeType": "text/plain",
                        "text": f"Error reading resource: {exc}",
                    }
                ]
            }
        return {"contents": [{"uri": resource.name, "mimeType": resource.mime_type, "text": text}]}

    # -- prompts ------------------------------------------------------------

    def _prompts_list(self, params: dict[str, Any]) -> dict[str, Any]:
        prompts = [
            MCPPromptDef(
                name=p.name,
                description=p.description,
                arguments=[
                    MCPPromptArgument(name=arg, description=desc)
                    for arg, desc in p.arguments.items()
                ],
            ).model_dump()
            for p in self._registry.list_prompts()
        ]
        return {"prompts": prompts}

    def _prompts_get(self, params: dict[str, Any]) -> dict[str, Any]:
        name = params.get("name")
        arguments = params.get("arguments") or {}
        _annotate(ATTR_PROMPT_NAME, name)
        if not isinstance(arguments, dict):
            msg = "Invalid Request: 'arguments' must be an object"
            raise InvalidRequestError(msg)

        prompt = self._registry.get_prompt(str(name))
        text = prompt.render(arguments, stringify=self._to_text)
        return {
            "description": prompt.description,
            "messages": [
                {"role": "user", "content": TextContent(text=text).model_dump()},
            ],
        }


def _annotate(key: str, value: Any) -> None:
    """Tag the current dispatch span, if any."""
    if value is not None:
        trace.get_current_span().set_attribute(key, str(value))
