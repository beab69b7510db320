"""
Pytest configuration for flag_identity integration tests.

These run the identity service against a real store. Import the shared
fixtures to make them available.
"""

# Re-export shared database fixtures
from tests.shared.fixtures.database import (
    async_engine,
    db_session,
)

__all__ = [
    "async_engine",
    "db_session",
]
