"""Aggregate statistics cache and its background refresher.

`StatsCache` holds the latest `StatsSnapshot`. `StatsRefresher` is its only
writer: it recomputes both counts on a fixed period and swaps in a new
snapshot only when both queries succeed. A failed refresh is logged and the
previous snapshot stays in place until the next tick.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from structlog import get_logger

from src.core.exceptions import StatsRefreshError
from src.domain.interfaces.repositories import IDomainRepository
from src.domain.value_objects.stats_snapshot import StatsSnapshot

logger = get_logger(__name__)

DEFAULT_REFRESH_INTERVAL_SECONDS = 60.0


class StatsCache:
    """Holds the current snapshot; reads never block.

    The snapshot is immutable and replaced by reference, so readers see
    either the old or the new pair of counts, never a mix.
    """

    def __init__(self, initial: Optional[StatsSnapshot] = None):
        self._snapshot = initial or StatsSnapshot()

    @property
    def snapshot(self) -> StatsSnapshot:
        return self._snapshot

    def replace(self, snapshot: StatsSnapshot) -> None:
        self._snapshot = snapshot


class StatsRefresher:
    """Periodic task keeping a `StatsCache` warm.

    The sleep function is injectable so tests can drive ticks without real
    delays.
    """

    def __init__(
        self,
        repository: IDomainRepository,
        cache: StatsCache,
        interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.repository = repository
        self.cache = cache
        self.interval_seconds = interval_seconds
        self._sleep = sleep
        self._task: Optional[asyncio.Task] = None

    async def _compute(self) -> StatsSnapshot:
        try:
            etld_count = await self.repository.count_etlds()
            domain_count = await self.repository.count_domains()
        except Exception as exc:
            raise StatsRefreshError(f"{type(exc).__name__}: {exc}") from exc
        return StatsSnapshot(
            domain_count=domain_count,
            etld_count=etld_count,
            refreshed_at=datetime.now(timezone.utc),
        )

    async def refresh_once(self) -> bool:
        """Recompute both counts and publish them.

        Returns:
            True if the snapshot was replaced, False if the refresh failed.
        """
        try:
            snapshot = await self._compute()
        except StatsRefreshError as exc:
            logger.error("stats_refresh_failed", error=exc.message)
            return False

        self.cache.replace(snapshot)
        logger.info(
            "stats_refreshed",
            domains=snapshot.domain_count,
            etlds=snapshot.etld_count,
            refreshed_at=snapshot.refreshed_at.isoformat(),
        )
        return True

    async def run(self) -> None:
        """Refresh immediately, then once per interval, until cancelled."""
        while True:
            await self.refresh_once()
            await self._sleep(self.interval_seconds)

    def start(self) -> asyncio.Task:
        """Schedule `run` on the running event loop."""
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run(), name="stats-refresher")
        return self._task

    async def stop(self) -> None:
        """Cancel the background task and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
