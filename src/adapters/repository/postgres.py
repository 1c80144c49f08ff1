"""
PostgreSQL user directory adapter - Implements UserDirectory protocol.

This module provides the PostgreSQL implementation of the domain's
user directory port using psycopg3 with raw SQL.

Duplicate accounts
------------------
Account creation is a single ``INSERT ... ON CONFLICT (email) DO NOTHING
RETURNING``. The UNIQUE constraint on ``users.email`` is the only guard
against two signups for the same address completing at the same time:
exactly one insert returns a row, the other returns nothing and is
reported as PersistenceError. There is no prior read to race against.
"""

import logging
from pathlib import Path

import psycopg
from psycopg_pool import ConnectionPool

from src.domain.exceptions import PersistenceError
from src.domain.models import NewUser, User

logger = logging.getLogger(__name__)


class PostgresUserDirectory:
    """
    Implements UserDirectory protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize directory with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def find_by_email(self, email: str) -> User | None:
        """
        Look up a user by exact email match.

        Returns:
            User, or None if no row matches

        Raises:
            PersistenceError: If the query failed
        """
        sql = """
            SELECT id, first_name, last_name, email, password_hash
            FROM users
            WHERE email = %s
        """
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (email,))
                row = cursor.fetchone()
        except psycopg.Error as e:
            raise PersistenceError("User lookup failed") from e

        if row is None:
            return None
        return User(
            id=row[0], first_name=row[1], last_name=row[2], email=row[3], password_hash=row[4]
        )

    def create(self, new_user: NewUser) -> User:
        """
        Atomically insert a user unless the email is already taken.

        Raises:
            PersistenceError: If the email exists or the insert failed
        """
        sql = """
            INSERT INTO users (first_name, last_name, email, password_hash)
            VALUES (%s, %s, %s, %s)
            ON CONFLICT (email) DO NOTHING
            RETURNING id
        """
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(
                    sql,
                    (
                        new_user.first_name,
                        new_user.last_name,
                        new_user.email,
                        new_user.password_hash,
                    ),
                )
                row = cursor.fetchone()
                conn.commit()
        except psycopg.Error as e:
            raise PersistenceError("User insert failed") from e

        if row is None:
            logger.warning("Account creation lost to an existing account for %s", new_user.email)
            raise PersistenceError("An account with this email already exists")

        return User(
            id=row[0],
            first_name=new_user.first_name,
            last_name=new_user.last_name,
            email=new_user.email,
            password_hash=new_user.password_hash,
        )


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
