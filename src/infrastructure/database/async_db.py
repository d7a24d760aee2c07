from __future__ import annotations

"""
Asynchronous Database Utilities Module

This module builds the asyncpg-backed SQLAlchemy engine used to read the
domain ledger, the session factory handed to repositories, and the startup
health check.

The service only ever issues single-statement reads, so sessions are never
committed. The connection pool is shared by request handlers and the stats
refresher.

**Security Note**: The connection URL carries credentials. It is never
logged; health check failures log the error class and message only.

Key Components:
    - create_engine_from_settings: Asynchronous engine for PostgreSQL.
    - create_session_factory: Factory for AsyncSession objects.
    - check_database_health: Startup connectivity check with retry.
"""

import time

from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from structlog import get_logger
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.core.config.settings import Settings

logger = get_logger(__name__)


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """
    Create the asynchronous engine for the configured DSN.

    Args:
        settings: Application settings providing the DSN and pool sizing.

    Returns:
        AsyncEngine: Engine with pre-ping enabled so stale pooled connections
        are replaced transparently.
    """
    return create_async_engine(
        settings.async_database_url,
        echo=False,
        pool_size=settings.POOL_SIZE,
        max_overflow=settings.MAX_OVERFLOW,
        pool_pre_ping=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to `engine`; objects stay usable after close."""
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((OperationalError, OSError)),
)
async def _ping(engine: AsyncEngine) -> None:
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def check_database_health(engine: AsyncEngine) -> bool:
    """
    Performs a health check on the database connection.

    Connection errors are retried with exponential backoff before giving up.

    Returns:
        bool: True if the database answered, False otherwise.
    """
    start_time = time.time()
    try:
        await _ping(engine)
    except Exception as e:
        logger.error(
            "database_health_check_failed",
            error=str(e),
            error_type=type(e).__name__,
            execution_time=time.time() - start_time,
        )
        return False

    logger.info(
        "database_health_check_success",
        execution_time=time.time() - start_time,
    )
    return True
