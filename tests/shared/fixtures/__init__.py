"""Shared pytest fixtures for all test packages."""

from tests.shared.fixtures.database import (
    async_engine,
    db_session,
    postgres_container,
    postgres_engine,
    postgres_session,
)
from tests.shared.fixtures.fakes import FakePasswordHasher

__all__ = [
    "FakePasswordHasher",
    "async_engine",
    "db_session",
    "postgres_container",
    "postgres_engine",
    "postgres_session",
]
