"""Engine and session factories for the document store.

Provides:
- create_engine: async engine for a database URL
- get_engine / get_session_maker: process-wide singletons from settings
- create_tables / drop_tables: schema management for all record models
"""

import logging
from functools import lru_cache
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from flag_config.settings import get_settings
from flag_store.base import DocumentBase

logger = logging.getLogger(__name__)


def create_engine(url: str, echo: bool = False, **kwargs) -> AsyncEngine:
    """Create an async engine for ``url``.

    For SQLite the driver's own transaction handling is disabled and
    SQLAlchemy emits BEGIN itself, so that rollbacks after a failed flush
    discard exactly the current transaction. File databases get their
    parent directory created.
    """
    parsed = make_url(url)
    is_sqlite = parsed.get_backend_name() == "sqlite"

    if is_sqlite and parsed.database and parsed.database != ":memory:":
        Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)

    if not is_sqlite:
        kwargs.setdefault("pool_pre_ping", True)

    engine = create_async_engine(url, echo=echo, **kwargs)

    if is_sqlite:
        _use_explicit_sqlite_transactions(engine)

    return engine


def _use_explicit_sqlite_transactions(engine: AsyncEngine) -> None:
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, _connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(connection):
        connection.exec_driver_sql("BEGIN")


# -----------------------------------------------------------------------------
# Engine & Session (Singleton)
# -----------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """
    Get the shared async database engine (singleton).

    The engine manages the connection pool and is reused across all requests.

    Returns
    -------
    AsyncEngine instance
    """
    settings = get_settings()
    return create_engine(settings.database_url, echo=settings.database_echo)


@lru_cache(maxsize=1)
def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """
    Get the shared async session maker (singleton).

    Returns
    -------
    async_sessionmaker configured with the shared engine
    """
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


# -----------------------------------------------------------------------------
# Schema Management
# -----------------------------------------------------------------------------


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all record tables (idempotent).

    Uses SQLAlchemy's create_all() which only creates missing tables, along
    with their unique constraints. Existing tables are never modified.
    Record models must be imported beforehand so they are registered on
    DocumentBase.metadata.
    """
    logger.info("Ensuring all database tables exist...")

    async with engine.begin() as conn:
        await conn.run_sync(DocumentBase.metadata.create_all)

    logger.info("Database schema is up to date (missing tables created if needed)")


async def drop_tables(engine: AsyncEngine) -> None:
    """
    Drop all record tables (USE WITH CAUTION!).

    This is primarily for testing and development reset scenarios.
    """
    logger.warning("Dropping all database tables...")

    async with engine.begin() as conn:
        await conn.run_sync(DocumentBase.metadata.drop_all)

    logger.info("Database tables dropped successfully")
