"""
Shared fixtures for integration tests.

Requires PostgreSQL to be running (DATABASE_URL). Tests are skipped when
no database is reachable.
"""

from collections.abc import Generator

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import run_migrations
from src.config.settings import get_settings


def open_test_pool() -> ConnectionPool:
    """Open a pool against DATABASE_URL and apply migrations, or skip."""
    settings = get_settings()
    try:
        with psycopg.connect(settings.database_url, connect_timeout=3):
            pass
    except psycopg.OperationalError as e:
        pytest.skip(f"PostgreSQL not reachable: {e}")

    pool = ConnectionPool(conninfo=settings.database_url, min_size=1, max_size=10, open=True)
    run_migrations(pool)
    return pool


def clean_tables(pool: ConnectionPool) -> None:
    with pool.connection() as conn:
        conn.execute("TRUNCATE posts, users, pending_registrations RESTART IDENTITY CASCADE")
        conn.commit()


@pytest.fixture(scope="module")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool for integration tests."""
    pool = open_test_pool()
    yield pool
    pool.close()


@pytest.fixture(autouse=True)
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Empty all tables before each test."""
    clean_tables(pool)
    yield
