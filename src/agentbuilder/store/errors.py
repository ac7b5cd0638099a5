"""Error types for the record store and identity collaborators."""

from __future__ import annotations


class StoreError(Exception):
    """Base error for record-store and identity failures."""


class RecordNotFoundError(StoreError):
    """No record with the given id exists."""

    def __init__(self, kind: str, record_id: str) -> None:
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} not found: {record_id}")


class AuthError(StoreError):
    """Sign-up, sign-in or session lookup failed."""


class AdminRequiredError(AuthError):
    """The caller is not an administrator."""

    def __init__(self, email: str | None = None) -> None:
        self.email = email
        who = email or "anonymous caller"
        super().__init__(f"Administrator access required ({who})")
