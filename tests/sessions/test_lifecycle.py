import asyncio
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from cc_slack.config.app import SessionRegistrySettings
from cc_slack.sessions.lifecycle import RegistrySweeper
from cc_slack.sessions.registry import SessionRegistry

pytestmark = pytest.mark.unit


class TestRegistrySweeper:
    """Tests for RegistrySweeper."""

    @pytest.fixture
    def mock_registry(self):
        registry = MagicMock(spec=SessionRegistry)
        registry.clean_older_than.return_value = 0
        return registry

    @pytest.fixture
    def sweeper(self, mock_registry):
        config = SessionRegistrySettings(max_age_days=30, sweep_interval_seconds=0.01)
        return RegistrySweeper(mock_registry, config)

    def test_max_age(self, sweeper):
        assert sweeper.max_age == timedelta(days=30)

    def test_sweep_uses_max_age(self, sweeper, mock_registry):
        mock_registry.clean_older_than.return_value = 3

        assert sweeper.sweep() == 3
        mock_registry.clean_older_than.assert_called_once_with(timedelta(days=30))

    @pytest.mark.asyncio
    async def test_start_creates_background_task(self, sweeper):
        await sweeper.start()

        assert sweeper._running is True
        assert sweeper._sweep_task is not None
        assert not sweeper._sweep_task.done()

        await sweeper.stop()
        assert sweeper._running is False
        assert sweeper._sweep_task is None

    @pytest.mark.asyncio
    async def test_start_twice_is_noop(self, sweeper):
        await sweeper.start()
        task = sweeper._sweep_task
        await sweeper.start()
        assert sweeper._sweep_task is task
        await sweeper.stop()

    @pytest.mark.asyncio
    async def test_stop_cancels_task(self, sweeper):
        await sweeper.start()
        task = sweeper._sweep_task

        await sweeper.stop()

        assert task.cancelled() or task.done()

    @pytest.mark.asyncio
    async def test_loop_sweeps_periodically(self, sweeper, mock_registry):
        await sweeper.start()
        await asyncio.sleep(0.05)
        await sweeper.stop()

        assert mock_registry.clean_older_than.call_count >= 1

    @pytest.mark.asyncio
    async def test_loop_survives_sweep_errors(self, sweeper, mock_registry):
        mock_registry.clean_older_than.side_effect = [RuntimeError("boom"), 0, 0, 0, 0, 0]
        await sweeper.start()
        await asyncio.sleep(0.05)

        assert not sweeper._sweep_task.done()
        await sweeper.stop()
        assert mock_registry.clean_older_than.call_count >= 2

    def test_evicts_real_entries(self):
        clock_now = [0.0]
        registry = SessionRegistry(clock=lambda: clock_now[0])
        registry.set("old", "111.111")
        clock_now[0] = 31 * 24 * 3600
        registry.set("new", "222.222")

        sweeper = RegistrySweeper(registry, SessionRegistrySettings())
        assert sweeper.sweep() == 1
        assert registry.get("old") == ""
        assert registry.get("new") == "222.222"
