"""ToolCatalog — resolves tools across the servers of a registry."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from agentbuilder.protocols.mcp.models import Tool, ToolRef, ToolServer
    from agentbuilder.protocols.mcp.registry import ServerRegistry


class ToolCatalog:
    """Read-only view over the tools of every registered server.

    When several servers expose a tool with the same name, :meth:`find_tool`
    returns the one registered first.
    """

    def __init__(self, registry: ServerRegistry) -> None:
        self._registry = registry

    def find_tool(self, name: str) -> tuple[ToolServer, Tool] | None:
        """Scan servers in registry order and return the first match."""
        for server in self._registry.list():
            tool = server.get_tool(name)
            if tool is not None:
                return server, tool
        return None

    def all_tools(self) -> list[Tool]:
        """Flatten every server's tool list; duplicates are kept."""
        return [tool for server in self._registry.list() for tool in server.tools]

    def tools_for(self, server_id: str) -> list[Tool]:
        server = self._registry.get(server_id)
        return list(server.tools) if server is not None else []

    def resolve(self, ref: ToolRef) -> tuple[ToolServer, Tool] | None:
        """Look up the exact ``serverId:toolName`` pair."""
        server = self._registry.get(ref.server_id)
        if server is None:
            return None
        tool = server.get_tool(ref.tool_name)
        if tool is None:
            return None
        return server, tool
