"""
PostgreSQL post repository - Implements PostRepository protocol.
"""

import psycopg
from psycopg_pool import ConnectionPool

from src.domain.exceptions import PersistenceError
from src.domain.models import Post

_SELECT_POSTS = """
    SELECT p.id, p.topic, p.thought, p.user_id, p.created_at,
           u.first_name || ' ' || u.last_name
    FROM posts p
    JOIN users u ON u.id = p.user_id
"""


class PostgresPostRepository:
    """Implements PostRepository protocol via psycopg3."""

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def add(self, user_id: int, topic: str, thought: str) -> Post:
        sql = """
            INSERT INTO posts (topic, thought, user_id)
            VALUES (%s, %s, %s)
            RETURNING id, created_at
        """
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (topic, thought, user_id))
                row = cursor.fetchone()
                conn.commit()
        except psycopg.Error as e:
            raise PersistenceError("Post insert failed") from e
        return Post(id=row[0], topic=topic, thought=thought, user_id=user_id, created_at=row[1])

    def list_recent(self) -> list[Post]:
        return self._fetch_all(_SELECT_POSTS + " ORDER BY p.created_at DESC, p.id DESC", ())

    def list_by_user(self, user_id: int) -> list[Post]:
        return self._fetch_all(
            _SELECT_POSTS + " WHERE p.user_id = %s ORDER BY p.created_at DESC, p.id DESC",
            (user_id,),
        )

    def _fetch_all(self, sql: str, params: tuple) -> list[Post]:
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, params)
                rows = cursor.fetchall()
        except psycopg.Error as e:
            raise PersistenceError("Post query failed") from e
        return [
            Post(
                id=row[0],
                topic=row[1],
                thought=row[2],
                user_id=row[3],
                created_at=row[4],
                author_name=row[5],
            )
            for row in rows
        ]
