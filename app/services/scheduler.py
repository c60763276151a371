"""Refresh scheduler - periodic timer driving refresh cycles."""

import asyncio

from loguru import logger

from app.models import SchedulerState
from app.services.refresh import RefreshOrchestrator


class RefreshScheduler:
    """Owns the refresh timer for one process.

    ``start()`` runs a cycle immediately (a full refresh when preloading,
    otherwise only if the cache is stale) and then one cycle per interval.
    ``stop()`` stops scheduling and waits for an in-flight cycle to finish.
    """

    def __init__(self, orchestrator: RefreshOrchestrator, interval: float, preload_on_startup: bool = True):
        self._orchestrator = orchestrator
        self._interval = interval
        self._preload = preload_on_startup
        self._task: asyncio.Task | None = None
        self._stopping: asyncio.Event | None = None
        self.state = SchedulerState.IDLE

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.running:
            return

        if self._preload:
            logger.info("Preloading all service data on startup...")
        await self.run_cycle(force=self._preload)

        self._stopping = asyncio.Event()
        self._task = asyncio.create_task(self._loop(), name="badge-refresh")
        logger.debug("Refresh scheduler started ({}s interval)", self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        if self._stopping is not None:
            self._stopping.set()
        await self._task
        self._task = None
        logger.debug("Refresh scheduler stopped")

    async def _loop(self) -> None:
        while True:
            try:
                await asyncio.wait_for(self._stopping.wait(), self._interval)
                return
            except TimeoutError:
                pass

            try:
                await self.run_cycle()
            except Exception as e:
                logger.exception("Refresh cycle failed: {}", e)

    async def run_cycle(self, force: bool = False) -> bool:
        """One validity check plus, when stale or forced, a full refresh."""
        try:
            if not force:
                self.state = SchedulerState.CHECKING
                if not await self._orchestrator.needs_refresh():
                    logger.debug("Badge cache is still valid, skipping update")
                    return False

            self.state = SchedulerState.REFRESHING
            await self._orchestrator.refresh_all()
            return True
        finally:
            self.state = SchedulerState.IDLE
