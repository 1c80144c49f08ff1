"""Repository adapters - Database implementations."""

from .pending import PostgresPendingRegistrationStore
from .postgres import PostgresUserDirectory, run_migrations
from .posts import PostgresPostRepository

__all__ = [
    "PostgresPendingRegistrationStore",
    "PostgresPostRepository",
    "PostgresUserDirectory",
    "run_migrations",
]
