"""Agent records and identity — interfaces to the hosted backend."""

from agentbuilder.store.errors import (
    AdminRequiredError,
    AuthError,
    RecordNotFoundError,
    StoreError,
)
from agentbuilder.store.memory import InMemoryAgentStore, InMemoryIdentityProvider
from agentbuilder.store.models import (
    Agent,
    AgentDraft,
    AgentStatus,
    AgentType,
    ClientProfile,
    UserSession,
)
from agentbuilder.store.provider import AgentStore, IdentityProvider, require_admin

__all__ = [
    "AdminRequiredError",
    "Agent",
    "AgentDraft",
    "AgentStatus",
    "AgentStore",
    "AgentType",
    "AuthError",
    "ClientProfile",
    "IdentityProvider",
    "InMemoryAgentStore",
    "InMemoryIdentityProvider",
    "RecordNotFoundError",
    "StoreError",
    "UserSession",
    "require_admin",
]
