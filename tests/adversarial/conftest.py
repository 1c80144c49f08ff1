"""
Shared fixtures for adversarial tests.

Provides common test infrastructure for race condition, brute force and
timing tests. Database-backed modules opt in with the clean_database
fixture and are skipped when PostgreSQL is not reachable.
"""

from collections.abc import Generator

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.pending import PostgresPendingRegistrationStore
from src.adapters.repository.postgres import PostgresUserDirectory, run_migrations
from src.config.settings import get_settings


@pytest.fixture(scope="module")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool for adversarial tests."""
    settings = get_settings()
    try:
        with psycopg.connect(settings.database_url, connect_timeout=3):
            pass
    except psycopg.OperationalError as e:
        pytest.skip(f"PostgreSQL not reachable: {e}")

    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=10,
        open=True,
    )
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Empty all tables before each test."""
    with pool.connection() as conn:
        conn.execute("TRUNCATE posts, users, pending_registrations RESTART IDENTITY CASCADE")
        conn.commit()
    yield


@pytest.fixture
def directory(pool: ConnectionPool) -> PostgresUserDirectory:
    return PostgresUserDirectory(pool)


@pytest.fixture
def store(pool: ConnectionPool) -> PostgresPendingRegistrationStore:
    return PostgresPendingRegistrationStore(pool)
