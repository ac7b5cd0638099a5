"""MCP protocol — Model Context Protocol client."""

from agentbuilder.protocols.mcp.catalog import ToolCatalog
from agentbuilder.protocols.mcp.client import MCPClient
from agentbuilder.protocols.mcp.dispatcher import RequestDispatcher
from agentbuilder.protocols.mcp.models import (
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    ServerStatus,
    Tool,
    ToolRef,
    ToolServer,
)
from agentbuilder.protocols.mcp.registry import ServerRegistry
from agentbuilder.protocols.mcp.schema import validate_arguments
from agentbuilder.protocols.mcp.transport import (
    HTTPTransport,
    MCPTransport,
    WebSocketTransport,
    create_transport,
)

__all__ = [
    "HTTPTransport",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MCPClient",
    "MCPTransport",
    "RequestDispatcher",
    "ServerRegistry",
    "ServerStatus",
    "Tool",
    "ToolCatalog",
    "ToolRef",
    "ToolServer",
    "WebSocketTransport",
    "create_transport",
    "validate_arguments",
]
