"""Agent Builder — MCP tool-server client and agent record collaborators."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from agentbuilder.protocols.mcp.client import MCPClient as MCPClient

_LAZY_EXPORTS = {
    "MCPClient": "agentbuilder.protocols.mcp.client",
}


def __getattr__(name: str) -> object:
    module_path = _LAZY_EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'agentbuilder' has no attribute {name!r}")
