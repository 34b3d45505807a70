"""mcpr — expose Python functions as Model Context Protocol tools, resources and prompts."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from mcpr.core.server import MCPServer as MCPServer
    from mcpr.core.server import mcp as mcp

_LAZY_EXPORTS = {
    "MCPServer": "mcpr.core.server",
    "mcp": "mcpr.core.server",
}


def __getattr__(name: str) -> object:
    module_path = _LAZY_EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'mcpr' has no attribute {name!r}")
