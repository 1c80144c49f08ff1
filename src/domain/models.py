"""
Domain models - Value types for users, pending signups and sessions.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from .ports import VerifyResult


@dataclass(frozen=True)
class User:
    """Durable account record."""

    id: int
    first_name: str
    last_name: str
    email: str
    password_hash: str


@dataclass(frozen=True)
class NewUser:
    """Account data ready to be inserted (no id assigned yet)."""

    first_name: str
    last_name: str
    email: str
    password_hash: str


@dataclass(frozen=True)
class AuthenticatedPrincipal:
    """Identity placed into the session once a user is authenticated."""

    id: int
    first_name: str
    last_name: str
    email: str


@dataclass(frozen=True)
class PendingRegistration:
    """
    In-flight signup awaiting OTP confirmation.

    Only the password digest is kept; the plaintext never leaves the
    signup request.
    """

    email: str
    first_name: str
    last_name: str
    password_hash: str
    otp: str
    issued_at: datetime
    attempts: int = 0

    def is_expired(self, now: datetime, ttl_seconds: int | None) -> bool:
        if ttl_seconds is None:
            return False
        return now - self.issued_at > timedelta(seconds=ttl_seconds)

    def with_failed_attempt(self) -> "PendingRegistration":
        return replace(self, attempts=self.attempts + 1)

    def to_new_user(self) -> NewUser:
        return NewUser(
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            password_hash=self.password_hash,
        )


@dataclass(frozen=True)
class MatchResult:
    """Outcome of comparing an entered code against the pending registration."""

    status: VerifyResult
    registration: PendingRegistration | None = None

    @property
    def matched(self) -> bool:
        return self.status == VerifyResult.SUCCESS


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a login attempt. ``user`` is set only on success."""

    user: User | None = None

    @property
    def ok(self) -> bool:
        return self.user is not None


@dataclass(frozen=True)
class Post:
    """A short authenticated post."""

    id: int
    topic: str
    thought: str
    user_id: int
    created_at: datetime
    author_name: str = ""
