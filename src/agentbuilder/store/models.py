"""Agent records, client profiles and sessions as kept by the hosted store."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from agentbuilder.protocols.mcp.models import ToolRef

MCP_TOOLS_KEY = "mcp_tools"


def utcnow() -> datetime:
    return datetime.now(UTC)


class AgentType(str, Enum):
    CHATBOT = "chatbot"
    MANAGER_AGENT = "manager_agent"
    WORKER_AGENT = "worker_agent"


class AgentStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"


class AgentDraft(BaseModel):
    """The insertable part of an agent record."""

    client_id: str
    name: str
    description: str | None = None
    agent_type: AgentType = AgentType.CHATBOT
    configuration: dict[str, Any] | None = None
    workflow_graph: dict[str, Any] | None = None
    status: AgentStatus = AgentStatus.DRAFT


class Agent(AgentDraft):
    """A stored agent configuration owned by one client."""

    id: str
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def selected_tools(self) -> list[ToolRef]:
        """MCP tools chosen for this agent, from ``configuration["mcp_tools"]``."""
        raw = (self.configuration or {}).get(MCP_TOOLS_KEY, [])
        return [ToolRef.parse(item) for item in raw]


class ClientProfile(BaseModel):
    """Per-user profile row created at sign-up."""

    id: str
    organization_name: str | None = None
    contact_email: str | None = None
    is_admin: bool = False
    plan_level: str = "basic"


class UserSession(BaseModel):
    """The signed-in identity, with the admin flag used for access gating."""

    user_id: str
    email: str
    is_admin: bool = False
