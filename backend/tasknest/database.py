"""
TaskNest Backend — Database Session Management
================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   Creates an async engine with connection pooling, provides a session
       dependency that commits on success and rolls back on error.
Who:   Route handlers receive a session via FastAPI's dependency injection
       and pass it explicitly to the service layer.
When:  Engine is created at module import; sessions are created per-request.

Transaction Model:
    One request == one transaction. Every service call made while handling a
    request shares the same AsyncSession; the commit happens once, after the
    handler returns and before the response is sent. A raised exception
    rolls back everything the request wrote. The checklist cloner
    additionally wraps each task insert in a SAVEPOINT
    (`session.begin_nested()`), so a single failed insert only discards
    that row.
"""

import logging
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from tasknest.config import settings
from tasknest.exceptions import DatabaseError

logger = logging.getLogger(__name__)


# ── Engine Configuration ──────────────────────────────────────────────────
def build_engine(database_url: str) -> AsyncEngine:
    """
    Create the async engine for `database_url`.

    Pool options only apply to server databases; SQLite's async dialect
    picks its own pool class and rejects the sizing arguments.
    """
    options = {
        # Echo SQL queries in DEBUG mode for development visibility
        "echo": settings.log_level == "DEBUG",
    }
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(database_url, **options)


engine = build_engine(settings.database_url)

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: response models are built from ORM attributes
# after the request transaction has committed
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models share this metadata object, which Alembic reads for
    autogenerate and the test suite uses for `create_all`.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def commit_request(session: AsyncSession) -> None:
    """
    Commit the request transaction, or roll it back and raise DatabaseError.

    Runs before the response is built, so a failed COMMIT reaches the
    client as a 500 instead of a success for a write that never landed.
    """
    try:
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error("Commit failed, request rolled back: %s", e, exc_info=True)
        raise DatabaseError(
            message="Could not save your changes. Please try again.",
            context={"error_type": type(e).__name__},
        ) from e


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler (the handler calls services)
        3. On error: rolls back the transaction and re-raises
        4. On success: commits via commit_request()
        5. Always: closes the session (returns connection to pool)

    Routes declare it with `scope="function"` so steps 3-5 finish before
    FastAPI sends the response:
        @router.get("/checklists/{checklist_id}")
        async def get_checklist(
            checklist_id: UUID,
            db: AsyncSession = Depends(get_db_session, scope="function"),
        ):
            return await checklist_service.get_checklist(db, checklist_id)
    """
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise  # Let the global error handler build the response
        await commit_request(session)


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def wait_for_database(
    target: Optional[AsyncEngine] = None,
    attempts: Optional[int] = None,
    max_wait: float = 10.0,
) -> None:
    """
    Block until `SELECT 1` succeeds, retrying connection failures.

    Retry policy (tenacity):
        - Only OperationalError/OSError (refused, DNS, timeouts) are retried
        - Exponential backoff with jitter, capped at `max_wait` seconds
        - The last error is re-raised once attempts run out

    Called from the application lifespan before the server reports ready.
    """
    target = target or engine
    retrying = AsyncRetrying(
        stop=stop_after_attempt(attempts or settings.db_connect_attempts),
        wait=wait_exponential_jitter(initial=0.5, max=max_wait),
        retry=retry_if_exception_type((OperationalError, OSError)),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            async with target.connect() as conn:
                await conn.execute(text("SELECT 1"))
    logger.info("Database connection verified")


async def dispose_engine() -> None:
    """Closes all pooled connections. Called during application shutdown."""
    await engine.dispose()
