"""
Authentication strategy - Password login against the user directory.

Fails closed: a lookup error, a malformed stored digest or any other
failure during verification is a failed login, never a success. The
"no such user" and "wrong password" paths both run one bcrypt check, so
neither response content nor timing reveals whether an email is registered.
"""

import logging
from dataclasses import dataclass, field

from .credentials import CredentialHasher
from .exceptions import HashingError
from .models import AuthResult
from .ports import UserDirectory

logger = logging.getLogger(__name__)


@dataclass
class AuthenticationStrategy:
    """Verifies login credentials for returning users."""

    users: UserDirectory
    hasher: CredentialHasher = field(default_factory=CredentialHasher)

    def authenticate(self, email: str, password: str) -> AuthResult:
        email = (email or "").strip()
        password = password or ""

        try:
            user = self.users.find_by_email(email) if email else None
        except Exception:
            logger.exception("User lookup failed during login")
            user = None

        try:
            if user is None:
                self.hasher.dummy_verify(password)
                return AuthResult()
            password_valid = self.hasher.verify(password, user.password_hash)
        except HashingError:
            logger.exception("Password verification failed during login")
            return AuthResult()

        if not password_valid:
            return AuthResult()
        return AuthResult(user)
