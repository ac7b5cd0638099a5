"""Configuration — YAML-driven client settings and server lists."""

from agentbuilder.config.loader import ConfigError, ConfigLoader
from agentbuilder.config.models import (
    DEFAULT_MCP_SERVERS,
    AppConfig,
    ClientSettings,
    ServerConfig,
    TelemetrySettings,
)

__all__ = [
    "DEFAULT_MCP_SERVERS",
    "AppConfig",
    "ClientSettings",
    "ConfigError",
    "ConfigLoader",
    "ServerConfig",
    "TelemetrySettings",
]
