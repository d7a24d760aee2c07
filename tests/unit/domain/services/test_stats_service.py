"""Tests for the aggregate statistics cache and refresher."""

import asyncio

import pytest
from sqlalchemy.exc import OperationalError

from src.domain.services.stats import StatsCache, StatsRefresher
from src.domain.value_objects.stats_snapshot import StatsSnapshot
from tests.factories import create_domain_record


@pytest.fixture
def populated_repository(repository):
    repository.records = [
        create_domain_record("a.com.au", etld="com.au"),
        create_domain_record("b.com.au", etld="com.au"),
        create_domain_record("c.net.au", etld="net.au"),
    ]
    return repository


def test_cache_starts_with_zero_counts():
    cache = StatsCache()

    assert cache.snapshot == StatsSnapshot(domain_count=0, etld_count=0)
    assert cache.snapshot.refreshed_at is None


def test_cache_replaces_snapshot_by_reference():
    cache = StatsCache()
    snapshot = StatsSnapshot(domain_count=10, etld_count=2)

    cache.replace(snapshot)

    assert cache.snapshot is snapshot


@pytest.mark.asyncio
async def test_refresh_publishes_both_counts(populated_repository, stats_cache):
    refresher = StatsRefresher(populated_repository, stats_cache)

    assert await refresher.refresh_once() is True

    assert stats_cache.snapshot.domain_count == 3
    assert stats_cache.snapshot.etld_count == 2
    assert stats_cache.snapshot.refreshed_at is not None


@pytest.mark.asyncio
async def test_failed_refresh_keeps_previous_snapshot(repository, mocker):
    previous = StatsSnapshot(domain_count=42, etld_count=7)
    cache = StatsCache(previous)
    repository.error = OperationalError("SELECT count(*)", {}, Exception("connection refused"))
    mock_logger = mocker.patch("src.domain.services.stats.stats_service.logger")
    refresher = StatsRefresher(repository, cache)

    assert await refresher.refresh_once() is False

    assert cache.snapshot is previous
    mock_logger.error.assert_called_once()
    assert mock_logger.error.call_args.args == ("stats_refresh_failed",)
    assert "connection refused" in mock_logger.error.call_args.kwargs["error"]


@pytest.mark.asyncio
async def test_one_failing_count_discards_the_other(populated_repository, mocker):
    previous = StatsSnapshot(domain_count=1, etld_count=1)
    cache = StatsCache(previous)
    mocker.patch.object(populated_repository, "count_domains", side_effect=OSError("reset"))
    refresher = StatsRefresher(populated_repository, cache)

    assert await refresher.refresh_once() is False
    assert cache.snapshot is previous


@pytest.mark.asyncio
async def test_run_refreshes_then_sleeps_each_tick(populated_repository, stats_cache):
    sleeps = []

    async def scripted_sleep(seconds):
        sleeps.append(seconds)
        if len(sleeps) == 3:
            raise asyncio.CancelledError()

    refresher = StatsRefresher(
        populated_repository, stats_cache, interval_seconds=60, sleep=scripted_sleep
    )

    with pytest.raises(asyncio.CancelledError):
        await refresher.run()

    assert sleeps == [60, 60, 60]
    assert stats_cache.snapshot.domain_count == 3


@pytest.mark.asyncio
async def test_run_survives_a_failed_tick(repository, stats_cache):
    ticks = []

    async def scripted_sleep(seconds):
        ticks.append(seconds)
        if len(ticks) == 1:
            # Store comes back before the second tick.
            repository.error = None
            repository.records = [create_domain_record("late.com.au")]
        else:
            raise asyncio.CancelledError()

    repository.error = OSError("down")
    refresher = StatsRefresher(repository, stats_cache, interval_seconds=1, sleep=scripted_sleep)

    with pytest.raises(asyncio.CancelledError):
        await refresher.run()

    assert stats_cache.snapshot.domain_count == 1


@pytest.mark.asyncio
async def test_start_and_stop_manage_the_background_task(populated_repository, stats_cache):
    refresher = StatsRefresher(populated_repository, stats_cache, interval_seconds=3600)

    task = refresher.start()
    assert refresher.start() is task

    for _ in range(3):
        await asyncio.sleep(0)
    assert stats_cache.snapshot.domain_count == 3

    await refresher.stop()

    assert task.cancelled()
    await refresher.stop()


@pytest.mark.asyncio
async def test_successful_refresh_is_logged_with_its_timestamp(
    populated_repository, stats_cache, mocker
):
    mock_logger = mocker.patch("src.domain.services.stats.stats_service.logger")
    refresher = StatsRefresher(populated_repository, stats_cache)

    await refresher.refresh_once()

    mock_logger.info.assert_called_once_with(
        "stats_refreshed",
        domains=3,
        etlds=2,
        refreshed_at=stats_cache.snapshot.refreshed_at.isoformat(),
    )
