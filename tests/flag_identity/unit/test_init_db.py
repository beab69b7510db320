"""Tests for the schema bootstrap commands."""

import pytest
from sqlalchemy import inspect

from flag_identity.infrastructure.persistence import init_db
from flag_store.database import create_engine


@pytest.fixture
def database_url(tmp_path, monkeypatch):
    url = f"sqlite+aiosqlite:///{tmp_path / 'flag.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    return url


async def _table_names(url: str) -> list[str]:
    engine = create_engine(url)
    try:
        async with engine.connect() as conn:
            return await conn.run_sync(
                lambda sync_conn: inspect(sync_conn).get_table_names(),
            )
    finally:
        await engine.dispose()


class TestInitDb:
    @pytest.mark.asyncio
    async def test_init_creates_users_table(self, database_url):
        await init_db._init_database()

        assert "users" in await _table_names(database_url)

    @pytest.mark.asyncio
    async def test_init_is_idempotent(self, database_url):
        await init_db._init_database()
        await init_db._init_database()

        assert "users" in await _table_names(database_url)

    @pytest.mark.asyncio
    async def test_forced_reset_recreates_tables(self, database_url):
        await init_db._init_database()

        await init_db._reset_database(force=True)

        assert "users" in await _table_names(database_url)

    @pytest.mark.asyncio
    async def test_drop_aborts_without_confirmation(self, database_url, monkeypatch):
        await init_db._init_database()
        monkeypatch.setattr("builtins.input", lambda _prompt: "no")

        with pytest.raises(SystemExit):
            await init_db._drop_database()

        assert "users" in await _table_names(database_url)

    @pytest.mark.asyncio
    async def test_drop_removes_tables_when_confirmed(
        self,
        database_url,
        monkeypatch,
    ):
        await init_db._init_database()
        monkeypatch.setattr("builtins.input", lambda _prompt: "yes")

        await init_db._drop_database()

        assert "users" not in await _table_names(database_url)
