"""Collaborator interfaces for the hosted identity provider and record store.

The MCP client never talks to these; the application wires them together at
its composition root.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from agentbuilder.store.errors import AdminRequiredError

if TYPE_CHECKING:
    from agentbuilder.store.models import Agent, AgentDraft, AgentStatus, UserSession


@runtime_checkable
class AgentStore(Protocol):
    """CRUD over agent records plus read-only aggregates for admin panels."""

    async def list_agents(self, client_id: str) -> list[Agent]: ...
    async def get_agent(self, agent_id: str) -> Agent: ...
    async def create_agent(self, draft: AgentDraft) -> Agent: ...
    async def update_agent(self, agent_id: str, **changes: Any) -> Agent: ...
    async def delete_agent(self, agent_id: str) -> None: ...
    async def count_agents(self) -> int: ...
    async def count_by_status(self) -> dict[AgentStatus, int]: ...


@runtime_checkable
class IdentityProvider(Protocol):
    """Email/password authentication and the current session."""

    async def sign_up(self, email: str, password: str) -> UserSession: ...
    async def sign_in(self, email: str, password: str) -> UserSession: ...
    async def sign_out(self) -> None: ...
    async def current_session(self) -> UserSession | None: ...


def require_admin(session: UserSession | None) -> UserSession:
    """Return *session* if it belongs to an administrator, else raise."""
    if session is None or not session.is_admin:
        raise AdminRequiredError(session.email if session else None)
    return session
