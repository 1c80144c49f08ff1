"""
Registration domain service - OTP-gated signup state machine.

This module contains the core business logic for user registration:
a signup form becomes a pending registration, an emailed one-time code
proves control of the address, and only then is the account created.

Per-session lifecycle
=====================

States:
- EMPTY: No signup in flight for this session
- ISSUED: Pending registration stored, code emailed
- CONSUMED: Code matched, pending record removed, account created (terminal)

Transitions:
    EMPTY    -> ISSUED    (begin_signup)
    ISSUED   -> ISSUED    (begin_signup again overwrites; wrong code keeps it)
    ISSUED   -> CONSUMED  (matching code)
    ISSUED   -> EMPTY     (expired or locked, only with hardening enabled)
    ISSUED   -> EMPTY     (abandon, on logout)

There is no retry limit or expiry unless ``ttl_seconds`` or ``max_attempts``
is configured.
"""

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .credentials import CredentialHasher
from .exceptions import (
    DuplicateAccountError,
    MailDeliveryError,
    OTPMismatchError,
    ValidationError,
)
from .models import AuthenticatedPrincipal, MatchResult, PendingRegistration
from .otp import OTPGenerator
from .ports import MailDispatcher, PendingRegistrationStore, UserDirectory, VerifyResult
from .session import SessionIdentity

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RegistrationFlow:
    """
    Domain service for user registration.

    Orchestrates the signup flow: field validation, duplicate check,
    password hashing, code issuance and delivery, code verification and
    account creation.
    """

    users: UserDirectory
    pending: PendingRegistrationStore
    mailer: MailDispatcher
    hasher: CredentialHasher = field(default_factory=CredentialHasher)
    otp_generator: OTPGenerator = field(default_factory=OTPGenerator)
    ttl_seconds: int | None = None
    max_attempts: int | None = None
    clock: Callable[[], datetime] = _utcnow

    def check_username(self, email: str) -> bool:
        """
        Return True if an account already uses this email.

        Raises:
            PersistenceError: If the lookup itself failed
        """
        return self.users.find_by_email(self._normalize_email(email)) is not None

    def begin_signup(
        self,
        session_key: str,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
    ) -> PendingRegistration:
        """
        Start a signup: validate, hash, issue a code and email it.

        Mail delivery failure is logged and does not abort the signup.

        Returns:
            The stored pending registration

        Raises:
            ValidationError: If any field is blank
            DuplicateAccountError: If an account with this email exists
            HashingError: If the password could not be hashed
            PersistenceError: If the lookup or the pending store failed
        """
        normalized_email = self._normalize_email(email or "")
        missing = [
            name
            for name, value in (
                ("email", normalized_email),
                ("password", password),
                ("first_name", (first_name or "").strip()),
                ("last_name", (last_name or "").strip()),
            )
            if not value
        ]
        if missing:
            raise ValidationError(missing)

        if self.check_username(normalized_email):
            raise DuplicateAccountError(normalized_email)

        registration = PendingRegistration(
            email=normalized_email,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            password_hash=self.hasher.hash(password),
            otp=self.otp_generator.generate(),
            issued_at=self.clock(),
        )
        self.pending.put(session_key, registration)

        try:
            self.mailer.send_otp(normalized_email, registration.otp)
        except MailDeliveryError:
            logger.exception("OTP delivery failed for pending signup %s", normalized_email)

        return registration

    def consume(self, session_key: str, entered_otp: str) -> MatchResult:
        """
        Compare an entered code with the session's pending registration.

        The pending record is removed only on a match. A wrong code leaves it
        untouched (or bumps its attempt counter when max_attempts is set).
        """
        registration = self.pending.get(session_key)
        if registration is None:
            # Keep the comparison on every path
            secrets.compare_digest(b"0" * len(entered_otp.encode()), entered_otp.encode())
            return MatchResult(VerifyResult.NOT_FOUND)

        code_valid = secrets.compare_digest(registration.otp.encode(), entered_otp.encode())

        if registration.is_expired(self.clock(), self.ttl_seconds):
            self.pending.discard(session_key)
            logger.info("Pending signup for %s expired", registration.email)
            return MatchResult(VerifyResult.EXPIRED)

        if self.max_attempts is not None and registration.attempts >= self.max_attempts:
            self.pending.discard(session_key)
            return MatchResult(VerifyResult.LOCKED)

        if not code_valid:
            if self.max_attempts is not None:
                attempts = self.pending.record_failed_attempt(session_key, registration.otp)
                if attempts >= self.max_attempts:
                    self.pending.discard(session_key)
                    logger.info("Pending signup for %s locked", registration.email)
                    return MatchResult(VerifyResult.LOCKED)
            return MatchResult(VerifyResult.INVALID_CODE, registration)

        taken = self.pending.take(session_key, registration.otp)
        if taken is None:
            # Replaced or consumed by a concurrent request
            return MatchResult(VerifyResult.NOT_FOUND)
        return MatchResult(VerifyResult.SUCCESS, taken)

    def verify(self, session_key: str, entered_otp: str) -> AuthenticatedPrincipal:
        """
        Consume the code and, on a match, create the account.

        Returns:
            The principal of the newly created user

        Raises:
            OTPMismatchError: If the code was not accepted (carries the VerifyResult)
            PersistenceError: If the account could not be created, including
                losing a race against another signup for the same email
        """
        match = self.consume(session_key, entered_otp)
        if not match.matched or match.registration is None:
            raise OTPMismatchError(match.status)

        user = self.users.create(match.registration.to_new_user())
        logger.info("Account created for user id %s", user.id)
        return SessionIdentity.from_user(user)

    def abandon(self, session_key: str) -> None:
        """
        Drop any signup in flight for this session.

        Raises:
            PersistenceError: If the pending store could not be updated
        """
        self.pending.discard(session_key)

    def _normalize_email(self, email: str) -> str:
        """
        Normalize email address for storage and lookup.

        Strips surrounding whitespace only; case is kept as entered.
        """
        return email.strip()
