"""
QuoteBook Backend — Database Session Management
=================================================

What:  Async SQLAlchemy engine, transactional session scope, schema bootstrap.
How:   One engine per process; one AsyncSession per request, committed on
       success and rolled back on any error.

Connection Pooling:
    PostgreSQL (asyncpg) gets a sized pool from settings. SQLite URLs keep
    SQLAlchemy's default pool, which rejects pool_size/max_overflow.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

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
    stop_after_attempt,
    wait_exponential_jitter,
)

from quotebook.config import settings

logger = logging.getLogger(__name__)


# ── Engine Configuration ──────────────────────────────────────────────────
# What: One async engine per process; it owns the connection pool
# Pool sizing comes from settings. SQLite URLs get SQLAlchemy's default pool
# because its SQLite pools reject pool_size/max_overflow.
def _engine_options() -> Dict[str, Any]:
    # SQL echo only at DEBUG; it is too noisy otherwise
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if not settings.uses_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


engine: AsyncEngine = create_async_engine(settings.database_url, **_engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# What: Hands out one AsyncSession per unit of work (request, seeding run)
# expire_on_commit=False: records stay readable after the request commits,
#   without a lazy reload outside the session
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
# SQLAlchemy 2.0 DeclarativeBase; its metadata is what Alembic autogenerates from
class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shared metadata for Alembic)."""
    pass


# ── Transaction Scope ─────────────────────────────────────────────────────
# Flow: open session → caller flushes writes → commit, or rollback on any error
@asynccontextmanager
async def session_scope(
    factory: async_sessionmaker = async_session_factory,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a session that commits on clean exit and rolls back on any exception.

    The exception is always re-raised so the service layer can map it.
    """
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# ── Schema Bootstrap ──────────────────────────────────────────────────────
# Attempts: DB_CONNECT_ATTEMPTS, waits grow exponentially from
# DB_CONNECT_MIN_WAIT up to DB_CONNECT_MAX_WAIT seconds, with 1s of jitter
async def init_models(target: AsyncEngine = engine) -> None:
    """
    Create any missing tables.

    What:  Runs Base.metadata.create_all against the engine.
    Why retry: under a process supervisor the database may still be starting
           when the API boots; tenacity backs off instead of crashing.
    """
    # Imported for its side effect of registering the table on Base.metadata
    from quotebook.models.quote import Quote  # noqa: F401

    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(settings.db_connect_attempts),
        wait=wait_exponential_jitter(
            initial=settings.db_connect_min_wait,
            max=settings.db_connect_max_wait,
            jitter=1,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    ):
        with attempt:
            async with target.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

    logger.info("Database schema ready")


async def dispose_engine() -> None:
    """Close every pooled connection (called on shutdown)."""
    await engine.dispose()
