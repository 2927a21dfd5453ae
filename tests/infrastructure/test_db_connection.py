"""Tests for engine creation, schema initialization and singleton disposal."""

from sqlalchemy import inspect
from sqlalchemy.pool import StaticPool

from devportal.infrastructure.persistence.database import (
    create_db_engine,
    db_connection,
    dispose_engine,
    get_engine,
    init_db,
)

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


async def test_memory_database_shares_one_connection():
    engine = create_db_engine(TEST_DATABASE_URL)
    try:
        assert isinstance(engine.pool, StaticPool)
    finally:
        await engine.dispose()


async def test_init_db_creates_schema_and_dispose_resets(monkeypatch):
    engine = create_db_engine(TEST_DATABASE_URL)
    monkeypatch.setattr(db_connection, "_engine", engine)

    await init_db()
    async with get_engine().connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())

    await dispose_engine()

    assert {"landscapes", "plugins", "teams", "users", "links"} <= set(tables)
    assert db_connection._engine is None
    assert db_connection._session_factory is None
