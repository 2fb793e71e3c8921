"""
Engine, sessions and transactions.

- ``create_database_engine`` / ``create_session_factory``: pooled asyncpg
  engine and the ``async_sessionmaker`` built on it (owned by the lifespan)
- ``get_db``: one ``AsyncSession`` per request
- ``transaction_scope``: all-or-nothing block used by account creation,
  currency conversion and the other multi-row writes
"""

import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import AsyncAdaptedQueuePool

from src.core.config import settings

logger = logging.getLogger(__name__)


def create_database_engine(database_url: str | None = None) -> AsyncEngine:
    """
    Build the pooled engine.

    Pool sizing comes from the ``DB_POOL_*`` settings; connections are
    pre-pinged and recycled hourly by default. With ``DEBUG`` on every
    statement is echoed. The Postgres ``application_name`` is set so sessions
    show up as the API in ``pg_stat_activity``.
    """
    engine = create_async_engine(
        database_url or settings.database_url_str,
        echo=settings.debug,
        echo_pool=settings.debug,
        poolclass=AsyncAdaptedQueuePool,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=settings.db_pool_recycle,
        pool_timeout=settings.db_pool_timeout,
        connect_args={
            "server_settings": {"application_name": f"ledgerline-{settings.environment}"},
        },
    )
    logger.info(
        "Database engine ready (pool_size=%s, max_overflow=%s)",
        settings.db_pool_size,
        settings.db_max_overflow,
    )
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Build the session factory shared by the application.

    Sessions keep loaded attributes after commit so services can return
    persisted instances to the routes without another round trip.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all tables known to the model metadata.

    Only missing tables are created; existing ones are left untouched.
    """
    from src.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding one session per request.

    The session factory is created by the lifespan handler and stored in
    ``app.state.sessionmaker``. Uncommitted work is rolled back when the
    request fails.

    Yields:
        AsyncSession bound to the application engine
    """
    sessionmaker: async_sessionmaker[AsyncSession] = request.app.state.sessionmaker

    async with sessionmaker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def transaction_scope(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Run a block of writes as one all-or-nothing unit.

    Acquires the session's connection on first use, commits when the block
    completes and rolls back when it raises. Either way the transaction ends
    and the connection goes back to the pool.

    Args:
        session: Session the block writes through

    Yields:
        The same session, for convenience

    Raises:
        Whatever the block raised, after the rollback

    Example:
        async with transaction_scope(self.session):
            account = await self.account_repo.add(account)
            await self.membership_repo.add(owner_membership)
    """
    try:
        yield session
        await session.commit()
    except Exception:
        logger.warning("Transaction rolled back", exc_info=True)
        await session.rollback()
        raise


async def check_database_connection(
    sessionmaker: async_sessionmaker[AsyncSession] | None,
) -> bool:
    """``SELECT 1`` through a fresh session; False before startup or on any DB error."""
    if sessionmaker is None:
        return False

    try:
        async with sessionmaker() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as exc:
        logger.error("Database readiness check failed: %s", exc)
        return False
    return True


async def close_database_connection(engine: AsyncEngine) -> None:
    """Dispose of the pool at shutdown."""
    await engine.dispose()
    logger.info("Database engine disposed")
