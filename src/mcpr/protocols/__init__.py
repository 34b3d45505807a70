"""Protocol layer — JSON-RPC errors and the MCP server implementation."""

from mcpr.protocols.errors import (
    InternalError,
    InvalidRequestError,
    MethodNotFoundError,
    NotFoundError,
    ParseError,
    PromptNotFoundError,
    ProtocolError,
    ResourceNotFoundError,
    ToolNotFoundError,
)

__all__ = [
    "InternalError",
    "InvalidRequestError",
    "MethodNotFoundError",
    "NotFoundError",
    "ParseError",
    "PromptNotFoundError",
    "ProtocolError",
    "ResourceNotFoundError",
    "ToolNotFoundError",
]
