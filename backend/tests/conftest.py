"""
TaskNest Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.

Fixture Hierarchy:
    Function-scoped:
    ├── mock_db_session: AsyncMock session for service unit tests (no DB)
    ├── db_engine:       async SQLite engine on a temp file, schema created
    ├── session_factory: sessionmaker bound to db_engine
    └── api_client:      HTTPX AsyncClient talking to the app, with the
                         session factory pointed at db_engine
"""

import os
import tempfile

# Override settings BEFORE any tasknest import builds the settings singleton
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="tasknest_test_"), "unused.db"
)
os.environ["BCRYPT_ROUNDS"] = "4"  # Minimum cost keeps hashing fast
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from tasknest.database import Base
from tasknest.models import checklist, profile, share_request, task, timer_log  # noqa: F401


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_checklist(mock_db_session):
            mock_db_session.get.return_value = checklist_row
            result = await service.get_checklist(mock_db_session, checklist_id)

    `begin_nested()` returns a MagicMock, which works as an async context
    manager and lets exceptions raised inside the block propagate.
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    session.begin_nested = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """
    Async SQLite engine with the full schema.

    pysqlite/aiosqlite issue their own BEGIN lazily, which breaks SAVEPOINT
    handling; the two listeners hand transaction control back to SQLAlchemy
    (recipe from the SQLAlchemy SQLite dialect docs).
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'tasknest.db'}")

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def api_client(session_factory, monkeypatch):
    """
    HTTPX AsyncClient wired to the FastAPI app through ASGITransport.

    The production `get_db_session` dependency stays in place; only the
    session factory it opens sessions from is pointed at the test database,
    so commit and rollback behave exactly as in a deployment.
    """
    from tasknest.main import app

    monkeypatch.setattr("tasknest.database.async_session_factory", session_factory)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
