"""Application lifecycle management.

This module wires the long-lived components at startup and tears them down at
shutdown. Everything stateful (stats cache, bucket table, connection pool) is
created here and stored on `app.state`; nothing is kept in module globals.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.core.config.settings import settings
from src.core.logging import logger
from src.domain.rate_limiting import AdmissionController
from src.domain.services.search import DomainSearchService
from src.domain.services.stats import StatsCache, StatsRefresher
from src.infrastructure.database.async_db import (
    check_database_health,
    create_engine_from_settings,
    create_session_factory,
)
from src.infrastructure.repositories import DomainRepository


def create_lifespan_manager():
    """Create the application lifespan manager.

    Returns:
        AsyncContextManager: The lifespan manager for the FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager that handles startup and shutdown events.

        Args:
            app (FastAPI): The FastAPI application instance

        Raises:
            RuntimeError: If the database is unreachable during startup. This
                is the only fatal error in the service.
        """
        # Startup
        engine = create_engine_from_settings(settings)
        if not await check_database_health(engine):
            logger.error("database_unavailable_on_startup")
            await engine.dispose()
            raise RuntimeError("Database unavailable")

        repository = DomainRepository(create_session_factory(engine))
        stats_cache = StatsCache()
        refresher = StatsRefresher(
            repository, stats_cache, interval_seconds=settings.STATS_REFRESH_SECONDS
        )

        app.state.search_service = DomainSearchService(
            repository, timeout_seconds=settings.QUERY_TIMEOUT_SECONDS
        )
        app.state.stats_cache = stats_cache
        app.state.admission_controller = AdmissionController.from_settings(settings)
        if settings.NOTHROTTLE:
            logger.warning("admission_control_disabled")
        elif not settings.RATE_LIMIT_MAX_CLIENTS:
            logger.info("admission_control_unbounded_client_table")

        refresher.start()
        logger.info("application_startup", version=settings.VERSION)

        yield

        # Shutdown
        await refresher.stop()
        await engine.dispose()
        logger.info("application_shutdown")

    return lifespan
