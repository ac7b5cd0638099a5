"""MCP models — JSON-RPC 2.0 envelopes, tool definitions and server records.

JSON payloads (tool arguments, results, error data) are typed with pydantic's
:data:`~pydantic.JsonValue`, the string / number / bool / object / array /
null union.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, JsonValue, model_validator

JSONRPC_VERSION = "2.0"

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request message."""

    jsonrpc: str = JSONRPC_VERSION
    method: str
    params: dict[str, JsonValue] = {}
    id: int | str = 1


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: JsonValue = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message.

    Exactly one of ``result`` and ``error`` must be present.  Presence of
    ``result`` is judged by the key, so ``"result": null`` is a valid
    success carrying ``None``.
    """

    jsonrpc: str = JSONRPC_VERSION
    id: int | str | None = None
    result: JsonValue = None
    error: JsonRpcError | None = None

    @model_validator(mode="before")
    @classmethod
    def _exactly_one_outcome(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        has_error = data.get("error") is not None
        has_result = "result" in data and not (has_error and data["result"] is None)
        if has_error and has_result:
            msg = "response carries both 'result' and 'error'"
            raise ValueError(msg)
        if not has_error and not has_result:
            msg = "response carries neither 'result' nor 'error'"
            raise ValueError(msg)
        return data

    @property
    def ok(self) -> bool:
        return self.error is None


# ---------------------------------------------------------------------------
# Tool servers
# ---------------------------------------------------------------------------


class ServerStatus(str, Enum):
    """Connection state of a registered tool server."""

    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    ERROR = "error"


class Tool(BaseModel):
    """A tool definition as returned by ``tools/list``."""

    model_config = {"populate_by_name": True}

    name: str
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=dict, alias="inputSchema")


class ToolServer(BaseModel):
    """A remote tool server and the tools it advertised at connect time."""

    id: str
    name: str
    url: str
    status: ServerStatus = ServerStatus.DISCONNECTED
    tools: list[Tool] = []
    error: str | None = None

    def get_tool(self, name: str) -> Tool | None:
        """Return the first tool called *name*, or ``None``."""
        for tool in self.tools:
            if tool.name == name:
                return tool
        return None


class ToolRef(BaseModel):
    """A qualified ``serverId:toolName`` reference to one invocable tool."""

    model_config = {"frozen": True}

    server_id: str
    tool_name: str

    @classmethod
    def parse(cls, value: str) -> ToolRef:
        """Parse ``"server:tool"``; the split happens on the first colon."""
        server_id, sep, tool_name = value.partition(":")
        if not sep or not server_id or not tool_name:
            msg = f"Invalid tool reference {value!r}, expected 'serverId:toolName'"
            raise ValueError(msg)
        return cls(server_id=server_id, tool_name=tool_name)

    def __str__(self) -> str:
        return f"{self.server_id}:{self.tool_name}"
