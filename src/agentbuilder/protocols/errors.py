"""Shared error types for the protocol layer."""

from __future__ import annotations

from typing import Any


class MCPError(Exception):
    """Base error for all MCP client failures."""


class TransportError(MCPError):
    """The network round trip failed (unreachable, timeout, malformed payload)."""


class RemoteToolError(MCPError):
    """The server was reached but the tool invocation itself failed."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        self.code = code
        self.message = message
        self.data = data
        super().__init__(f"Remote tool error {code}: {message}")


class ServerNotFoundError(MCPError):
    """No server with the given id is registered."""

    def __init__(self, server_id: str) -> None:
        self.server_id = server_id
        super().__init__(f"Server not found: {server_id}")


class ToolNotFoundError(MCPError):
    """The server does not advertise the requested tool."""

    def __init__(self, server_id: str, tool_name: str) -> None:
        self.server_id = server_id
        self.tool_name = tool_name
        super().__init__(f"Tool not found: {server_id}:{tool_name}")


class ValidationError(MCPError):
    """Tool arguments do not satisfy the tool's declared input schema."""

    def __init__(self, tool_name: str, problems: list[str]) -> None:
        self.tool_name = tool_name
        self.problems = problems
        detail = "; ".join(problems)
        super().__init__(f"Invalid arguments for {tool_name}: {detail}")
