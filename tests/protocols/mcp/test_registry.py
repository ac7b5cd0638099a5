"""Tests for ServerRegistry."""

from agentbuilder.protocols.mcp.models import ServerStatus, ToolServer
from agentbuilder.protocols.mcp.registry import ServerRegistry


def _server(server_id: str, status: ServerStatus = ServerStatus.CONNECTED) -> ToolServer:
    return ToolServer(id=server_id, name=server_id.upper(), url=f"http://{server_id}/mcp", status=status)


class TestServerRegistry:
    def test_register_and_get(self) -> None:
        registry = ServerRegistry()
        registry.register(_server("a"))
        assert registry.get("a") is not None
        assert "a" in registry
        assert len(registry) == 1

    def test_get_unknown_returns_none(self) -> None:
        assert ServerRegistry().get("missing") is None

    def test_list_in_insertion_order(self) -> None:
        registry = ServerRegistry()
        for server_id in ("b", "a", "c"):
            registry.register(_server(server_id))
        assert [s.id for s in registry.list()] == ["b", "a", "c"]

    def test_replace_keeps_position(self) -> None:
        registry = ServerRegistry()
        registry.register(_server("a"))
        registry.register(_server("b"))
        registry.register(_server("a", ServerStatus.ERROR))
        assert [s.id for s in registry.list()] == ["a", "b"]
        assert registry.get("a").status is ServerStatus.ERROR  # type: ignore[union-attr]
        assert len(registry) == 2

    def test_unregister_is_idempotent(self) -> None:
        registry = ServerRegistry()
        registry.register(_server("a"))
        registry.unregister("a")
        registry.unregister("a")
        registry.unregister("never-registered")
        assert registry.list() == []
