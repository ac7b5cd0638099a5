"""Protocol layer — MCP tool-server integration."""

from agentbuilder.protocols.errors import (
    MCPError,
    RemoteToolError,
    ServerNotFoundError,
    ToolNotFoundError,
    TransportError,
    ValidationError,
)

__all__ = [
    "MCPError",
    "RemoteToolError",
    "ServerNotFoundError",
    "ToolNotFoundError",
    "TransportError",
    "ValidationError",
]
