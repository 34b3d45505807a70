"""MCP models — JSON-RPC 2.0 envelopes and capability descriptors.

Implements the message format used by the Model Context Protocol for the
server side of ``initialize``, ``tools/*``, ``resources/*`` and ``prompts/*``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, StrictInt, StrictStr, model_validator

PROTOCOL_VERSION = "2024-11-05"

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request or notification.

    A message without an ``id`` member is a notification.  ``"id": null``
    on the wire is still a request, so the distinction is made on the set
    of fields actually provided rather than on the value.
    Ids are strict: a boolean or float id is rejected rather than coerced.
    """

    jsonrpc: Any = None
    method: str
    id: StrictInt | StrictStr | None = None
    params: dict[str, Any] | None = None

    @property
    def is_notification(self) -> bool:
        return "id" not in self.model_fields_set


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message.

    Exactly one of ``result`` and ``error`` goes on the wire; ``result`` may
    legitimately be ``None`` on a success response.
    """

    jsonrpc: str = "2.0"
    id: StrictInt | StrictStr | None = None
    result: Any = None
    error: JsonRpcError | None = None

    @model_validator(mode="after")
    def _result_xor_error(self) -> JsonRpcResponse:
        if self.error is not None and self.result is not None:
            msg = "a response carries either 'result' or 'error', not both"
            raise ValueError(msg)
        return self

    @classmethod
    def success(cls, request_id: int | str | None, result: Any) -> JsonRpcResponse:
        return cls(id=request_id, result=result)

    @classmethod
    def failure(
        cls,
        request_id: int | str | None,
        code: int,
        message: str,
        data: Any = None,
    ) -> JsonRpcResponse:
        return cls(id=request_id, error=JsonRpcError(code=code, message=message, data=data))

    def to_wire(self) -> dict[str, Any]:
        """Return the dict that is serialized onto the wire."""
        wire: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            wire["error"] = self.error.model_dump()
        else:
            wire["result"] = self.result
        return wire


# ---------------------------------------------------------------------------
# MCP-specific payloads
# ---------------------------------------------------------------------------


class ServerInfo(BaseModel):
    """Name and version reported in the ``initialize`` result."""

    model_config = {"frozen": True}

    name: str = "mcpr-server"
    version: str = "0.1.0"


class MCPToolDef(BaseModel):
    """A tool definition as returned by ``tools/list``."""

    model_config = {"populate_by_name": True}

    name: str
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=dict, alias="inputSchema")


class MCPResourceDef(BaseModel):
    """A resource definition as returned by ``resources/list``."""

    model_config = {"populate_by_name": True}

    uri: str
    name: str
    description: str = ""
    mime_type: str = Field(default="text/plain", alias="mimeType")


class MCPPromptArgument(BaseModel):
    """One named placeholder of a prompt template."""

    name: str
    description: str = ""


class MCPPromptDef(BaseModel):
    """A prompt definition as returned by ``prompts/list``."""

    name: str
    description: str = ""
    arguments: list[MCPPromptArgument] = []


class TextContent(BaseModel):
    """Plain text content part used by tool results and prompt messages."""

    type: str = "text"
    text: str
