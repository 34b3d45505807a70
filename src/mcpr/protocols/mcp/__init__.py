"""MCP protocol — Model Context Protocol server side."""

from mcpr.protocols.mcp.codec import decode, encode
from mcpr.protocols.mcp.dispatcher import MCPDispatcher
from mcpr.protocols.mcp.models import (
    PROTOCOL_VERSION,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    MCPPromptDef,
    MCPResourceDef,
    MCPToolDef,
    ServerInfo,
)
from mcpr.protocols.mcp.transport import MCPTransport, StdioTransport

__all__ = [
    "PROTOCOL_VERSION",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MCPDispatcher",
    "MCPPromptDef",
    "MCPResourceDef",
    "MCPToolDef",
    "MCPTransport",
    "ServerInfo",
    "StdioTransport",
    "decode",
    "encode",
]
