"""Unit tests for the background scheduler."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from mallfinder.services.scheduler import SchedulerService


@pytest.mark.asyncio
async def test_run_once_returns_cycle_counts():
    notifier = AsyncMock()
    notifier.run_cycle = AsyncMock(return_value={"users": 2, "notified": 1, "suppressed": 1, "failed": 0})
    scheduler = SchedulerService(notifier, interval_seconds=60)

    counts = await scheduler.run_once()

    assert counts["notified"] == 1


@pytest.mark.asyncio
async def test_run_once_swallows_cycle_errors():
    notifier = AsyncMock()
    notifier.run_cycle = AsyncMock(side_effect=RuntimeError("database unavailable"))
    scheduler = SchedulerService(notifier, interval_seconds=60)

    assert await scheduler.run_once() is None


@pytest.mark.asyncio
async def test_start_runs_immediately_and_stop_ends_loop():
    notifier = AsyncMock()
    notifier.run_cycle = AsyncMock(return_value={})
    scheduler = SchedulerService(notifier, interval_seconds=3600)

    task = asyncio.create_task(scheduler.start())
    for _ in range(5):
        await asyncio.sleep(0)

    assert scheduler.running
    await scheduler.stop()
    await asyncio.wait_for(task, timeout=1)

    assert not scheduler.running
    notifier.run_cycle.assert_awaited_once()
