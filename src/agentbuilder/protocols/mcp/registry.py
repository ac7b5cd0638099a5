"""ServerRegistry — the authoritative in-memory map of known tool servers."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from agentbuilder.protocols.mcp.models import ToolServer


class ServerRegistry:
    """Insertion-ordered mapping of server id to :class:`ToolServer`.

    Reads never raise: :meth:`get` returns ``None`` for unknown ids and
    :meth:`unregister` is a no-op for them.  The registry is plain
    single-loop state; it takes no locks.
    """

    def __init__(self) -> None:
        self._servers: dict[str, ToolServer] = {}

    def register(self, server: ToolServer) -> None:
        """Insert *server*, replacing any server with the same id in place."""
        self._servers[server.id] = server

    def unregister(self, server_id: str) -> None:
        """Remove the server with *server_id* if present."""
        self._servers.pop(server_id, None)

    def get(self, server_id: str) -> ToolServer | None:
        return self._servers.get(server_id)

    def list(self) -> list[ToolServer]:
        """Return all servers in registration order."""
        return list(self._servers.values())

    def __contains__(self, server_id: object) -> bool:
        return server_id in self._servers

    def __len__(self) -> int:
        return len(self._servers)
