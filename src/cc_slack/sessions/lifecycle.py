"""
Session registry lifecycle.

Runs the periodic eviction sweep that drops session/thread mappings once
they are older than the configured maximum age.
"""

import asyncio
import logging
from datetime import timedelta

from cc_slack.config.app import SessionRegistrySettings
from cc_slack.sessions.registry import SessionRegistry

logger = logging.getLogger(__name__)


class RegistrySweeper:
    """Owns the background task that evicts stale registry entries."""

    def __init__(self, registry: SessionRegistry, config: SessionRegistrySettings):
        self.registry = registry
        self.config = config

        self._running = False
        self._sweep_task: asyncio.Task | None = None

    @property
    def max_age(self) -> timedelta:
        return timedelta(days=self.config.max_age_days)

    async def start(self) -> None:
        """Start the sweep loop."""
        if self._running:
            return

        self._running = True
        self._sweep_task = asyncio.create_task(
            self._sweep_loop(),
            name="session-registry-sweep",
        )

        logger.info(
            f"RegistrySweeper started (every {self.config.sweep_interval_seconds:g}s, "
            f"max age {self.config.max_age_days:g}d)"
        )

    async def stop(self) -> None:
        """Stop the sweep loop and wait for it to exit."""
        self._running = False

        if self._sweep_task:
            self._sweep_task.cancel()
            await asyncio.gather(self._sweep_task, return_exceptions=True)
            self._sweep_task = None

        logger.info("RegistrySweeper stopped")

    def sweep(self) -> int:
        """Run one eviction pass."""
        removed = self.registry.clean_older_than(self.max_age)
        if removed:
            logger.info(f"Evicted {removed} stale session(s) from registry")
        return removed

    async def _sweep_loop(self) -> None:
        """Sleep first: a freshly started registry has nothing to evict."""
        while self._running:
            try:
                await asyncio.sleep(self.config.sweep_interval_seconds)
            except asyncio.CancelledError:
                break

            try:
                self.sweep()
            except Exception as e:
                logger.error(f"Error in sweep loop: {e}")
