"""Scheduler for background tasks (proximity notifications)."""

import asyncio

from mallfinder.logging import get_logger
from mallfinder.services.proximity_notifier import ProximityNotifier

logger = get_logger(__name__)


class SchedulerService:
    """Periodically runs the proximity notifier."""

    def __init__(self, notifier: ProximityNotifier, interval_seconds: int = 900):
        self.notifier = notifier
        self.interval_seconds = interval_seconds
        self._running = False
        self._wakeup = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start scheduler loop."""
        self._running = True
        self._wakeup.clear()
        logger.info("scheduler_started", interval_seconds=self.interval_seconds)

        while self._running:
            await self.run_once()
            try:
                await asyncio.wait_for(self._wakeup.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                pass

        logger.info("scheduler_stopped")

    async def stop(self) -> None:
        """Stop scheduler loop."""
        self._running = False
        self._wakeup.set()

    async def run_once(self) -> dict[str, int] | None:
        """Run one notifier cycle; errors are logged, never raised."""
        try:
            return await self.notifier.run_cycle()
        except Exception as e:
            logger.error("scheduler_cycle_failed", error=str(e), exc_info=True)
            return None
