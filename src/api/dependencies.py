"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

import secrets
from functools import lru_cache

from fastapi import Depends, Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.pending import PostgresPendingRegistrationStore
from src.adapters.repository.postgres import PostgresUserDirectory
from src.adapters.repository.posts import PostgresPostRepository
from src.adapters.smtp.console import ConsoleMailDispatcher
from src.adapters.smtp.smtp import SmtpMailDispatcher
from src.config.settings import Settings, get_settings
from src.domain.authentication import AuthenticationStrategy
from src.domain.credentials import CredentialHasher
from src.domain.models import AuthenticatedPrincipal
from src.domain.otp import OTPGenerator
from src.domain.ports import MailDispatcher
from src.domain.posts import PostBoard
from src.domain.registration import RegistrationFlow
from src.domain.session import SessionIdentity

PRINCIPAL_SESSION_KEY = "principal"
PENDING_SESSION_KEY = "pending_key"


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_user_directory(request: Request) -> PostgresUserDirectory:
    """Create user directory with connection pool from app state."""
    return PostgresUserDirectory(get_pool(request))


def get_pending_store(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> PostgresPendingRegistrationStore:
    """Create pending registration store; rows expire with the session cookie."""
    return PostgresPendingRegistrationStore(get_pool(request), settings.session_max_age_seconds)


def get_post_repository(request: Request) -> PostgresPostRepository:
    return PostgresPostRepository(get_pool(request))


@lru_cache
def get_mail_dispatcher() -> MailDispatcher:
    """
    Get the mail dispatcher (singleton).

    SMTP when a host is configured, console logging otherwise.
    """
    settings = get_settings()
    if not settings.smtp_host:
        return ConsoleMailDispatcher()
    return SmtpMailDispatcher(
        host=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.smtp_username,
        password=settings.smtp_password,
        sender=settings.mail_from,
        use_tls=settings.smtp_use_tls,
        timeout=settings.smtp_timeout_seconds,
    )


@lru_cache
def get_hasher() -> CredentialHasher:
    """Get the credential hasher (singleton, builds its timing-safety digest once)."""
    return CredentialHasher(cost=get_settings().bcrypt_cost)


def get_registration_flow(
    users: PostgresUserDirectory = Depends(get_user_directory),
    pending: PostgresPendingRegistrationStore = Depends(get_pending_store),
    mailer: MailDispatcher = Depends(get_mail_dispatcher),
    hasher: CredentialHasher = Depends(get_hasher),
    settings: Settings = Depends(get_settings),
) -> RegistrationFlow:
    """
    Create registration flow with injected dependencies.

    Wires together the user directory, pending store and mail dispatcher.
    """
    return RegistrationFlow(
        users=users,
        pending=pending,
        mailer=mailer,
        hasher=hasher,
        otp_generator=OTPGenerator(length=settings.otp_length),
        ttl_seconds=settings.otp_ttl_seconds,
        max_attempts=settings.otp_max_attempts,
    )


def get_authentication_strategy(
    users: PostgresUserDirectory = Depends(get_user_directory),
    hasher: CredentialHasher = Depends(get_hasher),
) -> AuthenticationStrategy:
    return AuthenticationStrategy(users=users, hasher=hasher)


def get_post_board(
    repository: PostgresPostRepository = Depends(get_post_repository),
) -> PostBoard:
    return PostBoard(repository=repository)


def get_current_principal(request: Request) -> AuthenticatedPrincipal | None:
    """Principal stored in the session, or None for anonymous visitors."""
    return SessionIdentity.deserialize(request.session.get(PRINCIPAL_SESSION_KEY))


def get_pending_session_key(request: Request) -> str:
    """
    Opaque key tying the session to its pending registration.

    Created on first use; the pending record itself lives server-side.
    """
    key = request.session.get(PENDING_SESSION_KEY)
    if not isinstance(key, str) or not key:
        key = secrets.token_urlsafe(32)
        request.session[PENDING_SESSION_KEY] = key
    return key
