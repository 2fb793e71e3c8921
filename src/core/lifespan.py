import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.core.config import settings
from src.core.database import (
    close_database_connection,
    create_database_engine,
    create_session_factory,
    create_tables,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Own the database engine for the lifetime of the process.

    On startup the engine and its ``async_sessionmaker`` are created and the
    factory is published as ``app.state.sessionmaker`` (read by ``get_db`` and
    the readiness probe). ``DB_CREATE_TABLES`` creates missing tables from the
    models for throwaway databases; real deployments run ``alembic upgrade
    head`` instead. On shutdown the pool is disposed.
    """
    logger.info(
        "Starting %s %s (%s)", settings.app_name, settings.version, settings.environment
    )

    engine = create_database_engine()
    if settings.db_create_tables:
        logger.warning("DB_CREATE_TABLES is on; creating tables from model metadata")
        await create_tables(engine)
    app.state.sessionmaker = create_session_factory(engine)

    try:
        yield
    finally:
        logger.info("Shutting down %s", settings.app_name)
        app.state.sessionmaker = None
        await close_database_connection(engine)
