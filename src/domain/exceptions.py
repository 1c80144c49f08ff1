"""
Domain exceptions - Semantic error types for registration and login.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .ports import VerifyResult


class AuthFlowError(Exception):
    """Base class for registration and authentication domain errors."""

    pass


class ValidationError(AuthFlowError):
    """A required form field is missing or blank."""

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(f"Missing required field(s): {', '.join(fields)}")


class DuplicateAccountError(AuthFlowError):
    """An account already exists for the submitted email."""

    pass


class MailDeliveryError(AuthFlowError):
    """The OTP email could not be delivered."""

    pass


class OTPMismatchError(AuthFlowError):
    """Entered code was not accepted for the pending registration."""

    def __init__(self, result: "VerifyResult") -> None:
        self.result = result
        super().__init__(f"OTP verification failed: {result.value}")


class HashingError(AuthFlowError):
    """Password hashing failed or a stored digest is malformed."""

    pass


class PersistenceError(AuthFlowError):
    """The durable store failed or rejected a write."""

    pass
