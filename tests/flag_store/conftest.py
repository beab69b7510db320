"""
Pytest configuration for flag_store tests.

Unit tests run against in-memory SQLite; tests under integration/ use a
Testcontainers PostgreSQL instance.
"""

# Re-export shared database fixtures
from tests.shared.fixtures.database import (
    async_engine,
    db_session,
    postgres_container,
    postgres_engine,
    postgres_session,
)

__all__ = [
    "async_engine",
    "db_session",
    "postgres_container",
    "postgres_engine",
    "postgres_session",
]
