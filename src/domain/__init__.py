"""
Domain layer - Pure business logic with zero web framework imports.

This package contains the registration state machine, password login and
session identity logic. It defines its own port interfaces for
infrastructure abstraction, so storage and mail delivery are adapters.
"""

from .authentication import AuthenticationStrategy
from .credentials import CredentialHasher
from .exceptions import (
    AuthFlowError,
    DuplicateAccountError,
    HashingError,
    MailDeliveryError,
    OTPMismatchError,
    PersistenceError,
    ValidationError,
)
from .models import AuthenticatedPrincipal, AuthResult, MatchResult, PendingRegistration, Post, User
from .otp import OTPGenerator
from .ports import (
    MailDispatcher,
    PendingRegistrationStore,
    PostRepository,
    UserDirectory,
    VerifyResult,
)
from .posts import PostBoard
from .registration import RegistrationFlow
from .session import SessionIdentity

__all__ = [
    "AuthFlowError",
    "AuthResult",
    "AuthenticatedPrincipal",
    "AuthenticationStrategy",
    "CredentialHasher",
    "DuplicateAccountError",
    "HashingError",
    "MailDeliveryError",
    "MailDispatcher",
    "MatchResult",
    "OTPGenerator",
    "OTPMismatchError",
    "PendingRegistration",
    "PendingRegistrationStore",
    "PersistenceError",
    "Post",
    "PostBoard",
    "PostRepository",
    "RegistrationFlow",
    "SessionIdentity",
    "User",
    "UserDirectory",
    "ValidationError",
    "VerifyResult",
]
