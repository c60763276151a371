"""Tests for the refresh scheduler."""

import asyncio

import pytest

from app.models import SchedulerState
from app.services import RefreshScheduler


class FakeOrchestrator:
    def __init__(self, stale: bool = True, fail: bool = False):
        self.stale = stale
        self.fail = fail
        self.checks = 0
        self.refreshes = 0
        self.seen_states: list[SchedulerState] = []
        self.scheduler: RefreshScheduler | None = None

    async def needs_refresh(self) -> bool:
        self.checks += 1
        if self.scheduler:
            self.seen_states.append(self.scheduler.state)
        return self.stale

    async def refresh_all(self):
        self.refreshes += 1
        if self.scheduler:
            self.seen_states.append(self.scheduler.state)
        if self.fail:
            raise RuntimeError("boom")
        return {}


def make(orchestrator: FakeOrchestrator, interval: float = 60, preload: bool = False) -> RefreshScheduler:
    scheduler = RefreshScheduler(orchestrator, interval=interval, preload_on_startup=preload)
    orchestrator.scheduler = scheduler
    return scheduler


class TestRunCycle:
    @pytest.mark.asyncio
    async def test_valid_cache_skips_refresh(self):
        orchestrator = FakeOrchestrator(stale=False)
        scheduler = make(orchestrator)

        assert await scheduler.run_cycle() is False
        assert orchestrator.refreshes == 0
        assert scheduler.state == SchedulerState.IDLE

    @pytest.mark.asyncio
    async def test_stale_cache_refreshes(self):
        orchestrator = FakeOrchestrator(stale=True)
        scheduler = make(orchestrator)

        assert await scheduler.run_cycle() is True
        assert orchestrator.seen_states == [SchedulerState.CHECKING, SchedulerState.REFRESHING]
        assert scheduler.state == SchedulerState.IDLE

    @pytest.mark.asyncio
    async def test_forced_cycle_skips_check(self):
        orchestrator = FakeOrchestrator(stale=False)
        scheduler = make(orchestrator)

        assert await scheduler.run_cycle(force=True) is True
        assert orchestrator.checks == 0
        assert orchestrator.refreshes == 1

    @pytest.mark.asyncio
    async def test_state_reset_after_failure(self):
        orchestrator = FakeOrchestrator(fail=True)
        scheduler = make(orchestrator)

        with pytest.raises(RuntimeError):
            await scheduler.run_cycle()
        assert scheduler.state == SchedulerState.IDLE


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_preload_refreshes_immediately(self):
        orchestrator = FakeOrchestrator(stale=False)
        scheduler = make(orchestrator, preload=True)

        await scheduler.start()
        try:
            assert orchestrator.refreshes == 1
            assert orchestrator.checks == 0
            assert scheduler.running
        finally:
            await scheduler.stop()

    @pytest.mark.asyncio
    async def test_startup_without_preload_checks_first(self):
        orchestrator = FakeOrchestrator(stale=False)
        scheduler = make(orchestrator)

        await scheduler.start()
        await scheduler.stop()

        assert orchestrator.checks == 1
        assert orchestrator.refreshes == 0

    @pytest.mark.asyncio
    async def test_ticks_until_stopped(self):
        orchestrator = FakeOrchestrator(stale=True)
        scheduler = make(orchestrator, interval=0.01)

        await scheduler.start()
        await asyncio.sleep(0.1)
        await scheduler.stop()
        ticks = orchestrator.refreshes
        await asyncio.sleep(0.05)

        assert ticks >= 3
        assert orchestrator.refreshes == ticks
        assert not scheduler.running
        assert scheduler.state == SchedulerState.IDLE

    @pytest.mark.asyncio
    async def test_failing_cycle_keeps_loop_alive(self):
        orchestrator = FakeOrchestrator(stale=True)
        scheduler = make(orchestrator, interval=0.01)
        await scheduler.start()

        orchestrator.fail = True
        await asyncio.sleep(0.05)
        assert scheduler.running
        await scheduler.stop()

    @pytest.mark.asyncio
    async def test_stop_without_start(self):
        scheduler = make(FakeOrchestrator())
        await scheduler.stop()
        assert not scheduler.running
