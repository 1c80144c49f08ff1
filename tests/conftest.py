"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- In-memory implementations of the domain ports
- A low-cost credential hasher
- Registration flow and authentication strategy wiring
"""

import threading

import pytest

from src.domain.authentication import AuthenticationStrategy
from src.domain.credentials import CredentialHasher
from src.domain.exceptions import MailDeliveryError, PersistenceError
from src.domain.models import NewUser, PendingRegistration, User
from src.domain.registration import RegistrationFlow

# bcrypt's minimum cost keeps unit tests fast
TEST_BCRYPT_COST = 4


class InMemoryUserDirectory:
    """UserDirectory with a uniqueness constraint on email."""

    def __init__(self) -> None:
        self.users: dict[str, User] = {}
        self.fail_lookups = False
        self._lock = threading.Lock()
        self._next_id = 1

    def find_by_email(self, email: str) -> User | None:
        if self.fail_lookups:
            raise PersistenceError("lookup failed")
        return self.users.get(email)

    def create(self, new_user: NewUser) -> User:
        with self._lock:
            if new_user.email in self.users:
                raise PersistenceError("An account with this email already exists")
            user = User(
                id=self._next_id,
                first_name=new_user.first_name,
                last_name=new_user.last_name,
                email=new_user.email,
                password_hash=new_user.password_hash,
            )
            self._next_id += 1
            self.users[user.email] = user
            return user


class InMemoryPendingStore:
    """PendingRegistrationStore keyed by session key."""

    def __init__(self) -> None:
        self.records: dict[str, PendingRegistration] = {}
        self._lock = threading.Lock()

    def put(self, session_key: str, registration: PendingRegistration) -> None:
        with self._lock:
            self.records[session_key] = registration

    def get(self, session_key: str) -> PendingRegistration | None:
        return self.records.get(session_key)

    def record_failed_attempt(self, session_key: str, otp: str) -> int:
        with self._lock:
            current = self.records.get(session_key)
            if current is None or current.otp != otp:
                return 0
            updated = current.with_failed_attempt()
            self.records[session_key] = updated
            return updated.attempts

    def take(self, session_key: str, otp: str) -> PendingRegistration | None:
        with self._lock:
            current = self.records.get(session_key)
            if current is None or current.otp != otp:
                return None
            return self.records.pop(session_key)

    def discard(self, session_key: str) -> None:
        with self._lock:
            self.records.pop(session_key, None)


class RecordingMailDispatcher:
    """MailDispatcher that records sent codes, optionally failing."""

    def __init__(self, fail: bool = False) -> None:
        self.sent: list[tuple[str, str]] = []
        self.fail = fail

    def send_otp(self, email: str, code: str) -> None:
        if self.fail:
            raise MailDeliveryError(f"Could not deliver OTP to {email}")
        self.sent.append((email, code))

    @property
    def last_code(self) -> str:
        return self.sent[-1][1]


@pytest.fixture(scope="session")
def hasher() -> CredentialHasher:
    return CredentialHasher(cost=TEST_BCRYPT_COST)


@pytest.fixture
def users() -> InMemoryUserDirectory:
    return InMemoryUserDirectory()


@pytest.fixture
def pending() -> InMemoryPendingStore:
    return InMemoryPendingStore()


@pytest.fixture
def mailer() -> RecordingMailDispatcher:
    return RecordingMailDispatcher()


@pytest.fixture
def flow(
    users: InMemoryUserDirectory,
    pending: InMemoryPendingStore,
    mailer: RecordingMailDispatcher,
    hasher: CredentialHasher,
) -> RegistrationFlow:
    return RegistrationFlow(users=users, pending=pending, mailer=mailer, hasher=hasher)


@pytest.fixture
def strategy(users: InMemoryUserDirectory, hasher: CredentialHasher) -> AuthenticationStrategy:
    return AuthenticationStrategy(users=users, hasher=hasher)
