"""Database initialization utilities."""

import asyncio
import logging
import sys

# Import models to register with DocumentBase.metadata
import flag_identity.infrastructure.persistence  # noqa: F401
from flag_config.settings import get_settings
from flag_store.database import create_engine, create_tables, drop_tables

logger = logging.getLogger(__name__)


def _get_engine():
    """Get a dedicated database engine for initialization."""
    settings = get_settings()
    return create_engine(settings.database_url)


def _display_url() -> str:
    database_url = get_settings().database_url
    return database_url.split("@")[-1] if "@" in database_url else database_url


def _confirm_destruction() -> None:
    print(f"Database: {_display_url()}")
    print()
    print("WARNING: This will DELETE ALL DATA in the database!")
    print()
    response = input("Type 'yes' to confirm: ")
    if response.lower() != "yes":
        print("Aborted.")
        sys.exit(1)
    print()


async def _init_database() -> None:
    """Initialize the database and create all tables."""
    logger.info("Initializing database: %s", _display_url())

    engine = _get_engine()
    try:
        await create_tables(engine)
    finally:
        await engine.dispose()

    logger.info("Database initialized successfully!")


async def _drop_database() -> None:
    """Drop all database tables."""
    _confirm_destruction()

    engine = _get_engine()
    try:
        await drop_tables(engine)
    finally:
        await engine.dispose()


async def _reset_database(force: bool = False) -> None:
    """Drop all tables and recreate them (USE WITH CAUTION!)."""
    if not force:
        _confirm_destruction()

    engine = _get_engine()
    try:
        await drop_tables(engine)
        await create_tables(engine)
    finally:
        await engine.dispose()

    logger.info("Database recreated successfully!")


def db_init():
    """Initialize database (create tables)."""
    logging.basicConfig(level=logging.INFO)
    asyncio.run(_init_database())


def db_drop():
    """Drop all database tables."""
    logging.basicConfig(level=logging.INFO)
    asyncio.run(_drop_database())


def db_reset():
    """Drop and recreate all database tables."""
    logging.basicConfig(level=logging.INFO)
    force = "--force" in sys.argv or "-f" in sys.argv
    asyncio.run(_reset_database(force=force))
