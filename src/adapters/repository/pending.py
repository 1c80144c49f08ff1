"""
PostgreSQL pending registration store - Implements PendingRegistrationStore.

One row per session key. The OTP and password digest stay server-side;
the session cookie only carries the opaque key.

Rows older than ``max_age_seconds`` outlive any session cookie that could
refer to them. They are treated as absent on read and deleted by
purge_stale(), which runs at startup and before every put().
"""

import logging
from datetime import timedelta

import psycopg
from psycopg_pool import ConnectionPool

from src.domain.exceptions import PersistenceError
from src.domain.models import PendingRegistration

logger = logging.getLogger(__name__)

_COLUMNS = "email, first_name, last_name, password_hash, otp, issued_at, attempts"


def _to_registration(row: tuple) -> PendingRegistration:
    return PendingRegistration(
        email=row[0],
        first_name=row[1],
        last_name=row[2],
        password_hash=row[3],
        otp=row[4],
        issued_at=row[5],
        attempts=row[6],
    )


class PostgresPendingRegistrationStore:
    """Implements PendingRegistrationStore protocol via psycopg3."""

    def __init__(self, pool: ConnectionPool, max_age_seconds: int | None = None) -> None:
        self._pool = pool
        self._max_age = timedelta(seconds=max_age_seconds) if max_age_seconds is not None else None

    def put(self, session_key: str, registration: PendingRegistration) -> None:
        """Insert or overwrite the session's pending registration."""
        self.purge_stale()
        sql = f"""
            INSERT INTO pending_registrations (session_key, {_COLUMNS})
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            ON CONFLICT (session_key) DO UPDATE
            SET email = EXCLUDED.email,
                first_name = EXCLUDED.first_name,
                last_name = EXCLUDED.last_name,
                password_hash = EXCLUDED.password_hash,
                otp = EXCLUDED.otp,
                issued_at = EXCLUDED.issued_at,
                attempts = EXCLUDED.attempts
        """
        params = (
            session_key,
            registration.email,
            registration.first_name,
            registration.last_name,
            registration.password_hash,
            registration.otp,
            registration.issued_at,
            registration.attempts,
        )
        self._execute(sql, params, fetch=False)

    def get(self, session_key: str) -> PendingRegistration | None:
        fresh, fresh_params = self._fresh_clause()
        sql = f"SELECT {_COLUMNS} FROM pending_registrations WHERE session_key = %s{fresh}"
        row = self._execute(sql, (session_key, *fresh_params))
        return _to_registration(row) if row is not None else None

    def record_failed_attempt(self, session_key: str, otp: str) -> int:
        fresh, fresh_params = self._fresh_clause()
        sql = f"""
            UPDATE pending_registrations
            SET attempts = attempts + 1
            WHERE session_key = %s AND otp = %s{fresh}
            RETURNING attempts
        """
        row = self._execute(sql, (session_key, otp, *fresh_params))
        return row[0] if row is not None else 0

    def take(self, session_key: str, otp: str) -> PendingRegistration | None:
        # DELETE ... RETURNING: only one concurrent caller gets the row
        fresh, fresh_params = self._fresh_clause()
        sql = f"""
            DELETE FROM pending_registrations
            WHERE session_key = %s AND otp = %s{fresh}
            RETURNING {_COLUMNS}
        """
        row = self._execute(sql, (session_key, otp, *fresh_params))
        return _to_registration(row) if row is not None else None

    def discard(self, session_key: str) -> None:
        sql = "DELETE FROM pending_registrations WHERE session_key = %s"
        self._execute(sql, (session_key,), fetch=False)

    def purge_stale(self) -> int:
        """
        Delete rows issued longer ago than the session lifetime.

        Returns:
            Number of rows removed (0 when no max age is configured)

        Raises:
            PersistenceError: If the delete failed
        """
        if self._max_age is None:
            return 0
        sql = "DELETE FROM pending_registrations WHERE issued_at < now() - %s"
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (self._max_age,))
                removed = cursor.rowcount
                conn.commit()
        except psycopg.Error as e:
            raise PersistenceError("Pending registration sweep failed") from e
        if removed:
            logger.info("Removed %d stale pending registrations", removed)
        return removed

    def _fresh_clause(self) -> tuple[str, tuple]:
        if self._max_age is None:
            return "", ()
        return " AND issued_at >= now() - %s", (self._max_age,)

    def _execute(self, sql: str, params: tuple, fetch: bool = True) -> tuple | None:
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, params)
                row = cursor.fetchone() if fetch else None
                conn.commit()
                return row
        except psycopg.Error as e:
            raise PersistenceError("Pending registration store failed") from e
