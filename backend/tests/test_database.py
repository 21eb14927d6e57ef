"""
TaskNest Backend — Database Helper Tests
==========================================

What:  Startup connectivity probe and engine construction.
"""

import pytest
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from tasknest.database import build_engine, wait_for_database


class FlakyEngine:
    """Fails `failures` times with a connection error, then connects."""

    def __init__(self, failures, real_engine):
        self.failures = failures
        self.calls = 0
        self.real_engine = real_engine

    def connect(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise OperationalError("connect", {}, ConnectionRefusedError("refused"))
        return self.real_engine.connect()


class TestWaitForDatabase:

    @pytest.mark.asyncio
    async def test_succeeds_against_live_engine(self, db_engine):
        await wait_for_database(db_engine, attempts=1)

    @pytest.mark.asyncio
    async def test_retries_transient_failures(self, db_engine):
        flaky = FlakyEngine(failures=2, real_engine=db_engine)

        await wait_for_database(flaky, attempts=3, max_wait=0.01)

        assert flaky.calls == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_attempts(self, db_engine):
        flaky = FlakyEngine(failures=10, real_engine=db_engine)

        with pytest.raises(OperationalError):
            await wait_for_database(flaky, attempts=2, max_wait=0.01)
        assert flaky.calls == 2

    @pytest.mark.asyncio
    async def test_other_errors_not_retried(self):
        broken = MagicMock()
        broken.connect.side_effect = RuntimeError("misconfigured")

        with pytest.raises(RuntimeError):
            await wait_for_database(broken, attempts=5, max_wait=0.01)
        assert broken.connect.call_count == 1


class TestBuildEngine:

    @pytest.mark.asyncio
    async def test_sqlite_url_skips_pool_sizing(self, tmp_path):
        engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'x.db'}")
        try:
            assert engine.dialect.name == "sqlite"
        finally:
            await engine.dispose()
