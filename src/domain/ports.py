"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .models import NewUser, PendingRegistration, Post, User


class VerifyResult(Enum):
    """
    Result of an OTP verification attempt.

    Registration lifecycle per session:
    - (empty) -> ISSUED on signup submit
    - ISSUED -> CONSUMED on SUCCESS (terminal)
    - ISSUED -> ISSUED on INVALID_CODE (retry allowed)
    - ISSUED -> (empty) on EXPIRED or LOCKED, only when hardening is enabled
    """

    SUCCESS = "success"
    INVALID_CODE = "invalid_code"
    EXPIRED = "expired"
    LOCKED = "locked"
    NOT_FOUND = "not_found"


class UserDirectory(Protocol):
    """Port interface for durable user accounts."""

    def find_by_email(self, email: str) -> "User | None":
        """
        Look up a user by email.

        Returns:
            The user, or None if no account uses this email

        Raises:
            PersistenceError: If the store itself failed (distinct from not found)
        """
        ...

    def create(self, new_user: "NewUser") -> "User":
        """
        Insert a user if no account with the same email exists.

        Raises:
            PersistenceError: If the email is already taken or the write failed
        """
        ...


class PendingRegistrationStore(Protocol):
    """Port interface for session-keyed pending registrations."""

    def put(self, session_key: str, registration: "PendingRegistration") -> None:
        """Store a pending registration, replacing any previous one for the key."""
        ...

    def get(self, session_key: str) -> "PendingRegistration | None":
        """Return the pending registration for the key, if any."""
        ...

    def record_failed_attempt(self, session_key: str, otp: str) -> int:
        """
        Increment the attempt counter of the registration issued with ``otp``.

        Returns:
            The new attempt count, or 0 if the registration was replaced or removed
        """
        ...

    def take(self, session_key: str, otp: str) -> "PendingRegistration | None":
        """
        Atomically remove and return the registration issued with ``otp``.

        Returns None if it was already consumed or replaced, so a code can be
        redeemed at most once.
        """
        ...

    def discard(self, session_key: str) -> None:
        """Remove any pending registration for the key."""
        ...


class MailDispatcher(Protocol):
    """Port interface for OTP email delivery."""

    def send_otp(self, email: str, code: str) -> None:
        """
        Deliver the one-time code to the email address.

        Raises:
            MailDeliveryError: If the message could not be handed to the transport
        """
        ...


class PostRepository(Protocol):
    """Port interface for post persistence."""

    def add(self, user_id: int, topic: str, thought: str) -> "Post":
        ...

    def list_recent(self) -> "list[Post]":
        ...

    def list_by_user(self, user_id: int) -> "list[Post]":
        ...
