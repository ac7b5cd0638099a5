"""Pydantic models for the ``agentbuilder.yaml`` configuration file."""

from __future__ import annotations

from pydantic import BaseModel, Field

from agentbuilder import __version__


class ClientSettings(BaseModel):
    """Behaviour of the MCP client."""

    timeout: float = Field(default=30.0, gt=0, description="Seconds to wait for each response.")
    handshake: bool = Field(default=True, description="Send 'initialize' before discovery.")
    protocol_version: str = "2024-11-05"
    client_name: str = "agentbuilder"
    client_version: str = __version__
    headers: dict[str, str] = {}


class ServerConfig(BaseModel):
    """A tool server to connect at start-up."""

    id: str
    name: str
    url: str


class TelemetrySettings(BaseModel):
    """Optional telemetry configuration."""

    enabled: bool = False
    service_name: str = "agentbuilder"
    otlp_endpoint: str | None = None


DEFAULT_MCP_SERVERS: list[ServerConfig] = [
    ServerConfig(id="mcp-default", name="Default MCP Server", url="http://localhost:3000/mcp"),
]


class AppConfig(BaseModel):
    """Top-level configuration parsed from YAML."""

    client: ClientSettings = Field(default_factory=ClientSettings)
    servers: list[ServerConfig] = Field(
        default_factory=lambda: [s.model_copy() for s in DEFAULT_MCP_SERVERS]
    )
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)
