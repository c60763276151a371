"""Tests for the refresher entry point."""

import asyncio
import os
import signal

import pytest

import run


class FakeContainer:
    """Receives SIGTERM in the middle of its startup cycle."""

    def __init__(self):
        self.cycle_finished = False
        self.shut_down = False

    async def start(self):
        os.kill(os.getpid(), signal.SIGTERM)
        await asyncio.sleep(0.05)
        self.cycle_finished = True

    async def shutdown(self):
        self.shut_down = True


class TestMain:
    @pytest.mark.asyncio
    async def test_signal_during_startup_waits_for_cycle(self, monkeypatch):
        container = FakeContainer()
        monkeypatch.setattr(run, "verify_required_variables", lambda: None)
        monkeypatch.setattr(run, "Container", lambda: container)

        assert await asyncio.wait_for(run.main(), 5) == 0
        assert container.cycle_finished
        assert container.shut_down
