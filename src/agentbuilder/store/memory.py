"""In-memory implementations of the store and identity collaborators."""

from __future__ import annotations

import hashlib
import logging
from collections import Counter
from typing import Any
from uuid import uuid4

from agentbuilder.store.errors import AuthError, RecordNotFoundError
from agentbuilder.store.models import (
    Agent,
    AgentDraft,
    AgentStatus,
    ClientProfile,
    UserSession,
    utcnow,
)

logger = logging.getLogger(__name__)

_IMMUTABLE_FIELDS = frozenset({"id", "client_id", "created_at", "updated_at"})


class InMemoryAgentStore:
    """Satisfies :class:`~agentbuilder.store.provider.AgentStore`."""

    def __init__(self) -> None:
        self._agents: dict[str, Agent] = {}

    async def list_agents(self, client_id: str) -> list[Agent]:
        return [a for a in self._agents.values() if a.client_id == client_id]

    async def get_agent(self, agent_id: str) -> Agent:
        agent = self._agents.get(agent_id)
        if agent is None:
            raise RecordNotFoundError("Agent", agent_id)
        return agent

    async def create_agent(self, draft: AgentDraft) -> Agent:
        agent = Agent(id=uuid4().hex, **draft.model_dump())
        self._agents[agent.id] = agent
        return agent

    async def update_agent(self, agent_id: str, **changes: Any) -> Agent:
        """Apply *changes* and refresh ``updated_at``."""
        current = await self.get_agent(agent_id)
        blocked = _IMMUTABLE_FIELDS.intersection(changes)
        if blocked:
            msg = f"Cannot update field(s): {', '.join(sorted(blocked))}"
            raise ValueError(msg)
        data = {**current.model_dump(), **changes, "updated_at": utcnow()}
        updated = Agent.model_validate(data)
        self._agents[agent_id] = updated
        return updated

    async def delete_agent(self, agent_id: str) -> None:
        if self._agents.pop(agent_id, None) is None:
            raise RecordNotFoundError("Agent", agent_id)

    async def count_agents(self) -> int:
        return len(self._agents)

    async def count_by_status(self) -> dict[AgentStatus, int]:
        counts = Counter(a.status for a in self._agents.values())
        return {status: counts.get(status, 0) for status in AgentStatus}


class InMemoryIdentityProvider:
    """Satisfies :class:`~agentbuilder.store.provider.IdentityProvider`.

    Passwords are kept as SHA-256 digests; this is a local stand-in for the
    hosted provider, not an authentication scheme.
    """

    def __init__(self) -> None:
        self._users: dict[str, tuple[str, str]] = {}  # email -> (user_id, digest)
        self._profiles: dict[str, ClientProfile] = {}
        self._session: UserSession | None = None

    async def sign_up(self, email: str, password: str) -> UserSession:
        """Create the account and a non-admin ``basic`` profile, then sign in."""
        if email in self._users:
            raise AuthError(f"User already registered: {email}")
        user_id = uuid4().hex
        self._users[email] = (user_id, _digest(password))
        self._profiles[user_id] = ClientProfile(id=user_id, contact_email=email)
        logger.info("Registered user %s", email)
        self._session = UserSession(user_id=user_id, email=email)
        return self._session

    async def sign_in(self, email: str, password: str) -> UserSession:
        entry = self._users.get(email)
        if entry is None or entry[1] != _digest(password):
            raise AuthError("Invalid login credentials")
        user_id = entry[0]
        profile = self._profiles.get(user_id)
        self._session = UserSession(
            user_id=user_id, email=email, is_admin=bool(profile and profile.is_admin)
        )
        return self._session

    async def sign_out(self) -> None:
        self._session = None

    async def current_session(self) -> UserSession | None:
        return self._session

    def get_profile(self, user_id: str) -> ClientProfile:
        profile = self._profiles.get(user_id)
        if profile is None:
            raise RecordNotFoundError("ClientProfile", user_id)
        return profile

    def set_admin(self, user_id: str, is_admin: bool = True) -> ClientProfile:
        """Flip the admin flag on a profile (takes effect at next sign-in)."""
        profile = self.get_profile(user_id).model_copy(update={"is_admin": is_admin})
        self._profiles[user_id] = profile
        return profile


def _digest(password: str) -> str:
    return hashlib.sha256(password.encode()).hexdigest()
