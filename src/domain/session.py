"""
Session identity - Principal projection stored in the session.

Only the id and display fields are written to the session; the password
hash never leaves the user directory.
"""

from typing import Any

from .models import AuthenticatedPrincipal, User

PRINCIPAL_FIELDS = ("id", "first_name", "last_name", "email")


class SessionIdentity:
    """Serializes the authenticated principal to and from session data."""

    @staticmethod
    def from_user(user: User) -> AuthenticatedPrincipal:
        return AuthenticatedPrincipal(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
        )

    @staticmethod
    def serialize(principal: AuthenticatedPrincipal) -> dict[str, Any]:
        return {name: getattr(principal, name) for name in PRINCIPAL_FIELDS}

    @staticmethod
    def deserialize(record: Any) -> AuthenticatedPrincipal | None:
        """
        Rebuild the principal from session data.

        Returns None for missing or malformed records, so a tampered or
        stale session is treated as anonymous.
        """
        if not isinstance(record, dict):
            return None
        try:
            user_id = record["id"]
            names = [record[name] for name in PRINCIPAL_FIELDS[1:]]
        except KeyError:
            return None
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            return None
        if not all(isinstance(value, str) for value in names):
            return None
        first_name, last_name, email = names
        return AuthenticatedPrincipal(
            id=user_id, first_name=first_name, last_name=last_name, email=email
        )
