"""Relay text into a tmux pane with send-keys.

The text is sent literally (send-keys -l) and the Enter keystroke follows as
a second send-keys call. The two calls are not atomic: the text can land
without being submitted.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from typing import Protocol

from cc_slack.config.tmux import TmuxConfig

logger = logging.getLogger(__name__)


class TmuxError(RuntimeError):
    """Base class for tmux relay failures."""


class TmuxNotFoundError(TmuxError):
    """Raised when the tmux binary is not installed or not on PATH."""

    def __init__(self, command: str = "tmux") -> None:
        super().__init__(f"tmux binary '{command}' not found")
        self.command = command


class TmuxSendError(TmuxError):
    """Raised when one of the send-keys steps fails."""

    def __init__(self, step: str, target: str, detail: str) -> None:
        super().__init__(f"tmux send-keys {step} (target={target}): {detail}")
        self.step = step
        self.target = target


class TerminalRelay(Protocol):
    """Anything that can type a line into a terminal target and submit it."""

    async def send_keys(self, target: str, text: str) -> None: ...


class TmuxRelay:
    """Sends keys to panes on the user's tmux server."""

    def __init__(self, config: TmuxConfig | None = None) -> None:
        self._config = config or TmuxConfig()

    @property
    def config(self) -> TmuxConfig:
        return self._config

    def _base_args(self) -> list[str]:
        args = [self._config.command]
        if self._config.socket_name:
            args.extend(["-L", self._config.socket_name])
        return args

    def is_available(self) -> bool:
        return shutil.which(self._config.command) is not None

    async def _run(self, *tmux_args: str) -> tuple[int, str]:
        """Run a tmux subcommand and return (returncode, stderr)."""
        cmd = [*self._base_args(), *tmux_args]
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise TmuxNotFoundError(self._config.command) from e

        try:
            _stdout, stderr_bytes = await asyncio.wait_for(
                proc.communicate(), timeout=self._config.timeout
            )
        except TimeoutError:
            proc.kill()
            await proc.wait()
            raise
        return proc.returncode or 0, (stderr_bytes or b"").decode(errors="replace")

    async def _send(self, step: str, target: str, *keys: str) -> None:
        try:
            rc, stderr = await self._run("send-keys", "-t", target, *keys)
        except TimeoutError as e:
            raise TmuxSendError(step, target, "timed out") from e
        except OSError as e:
            raise TmuxSendError(step, target, str(e)) from e
        if rc != 0:
            raise TmuxSendError(step, target, f"rc={rc}: {stderr.strip()}")

    async def send_keys(self, target: str, text: str) -> None:
        """
        Type text into a pane and press Enter.

        Raises:
            TmuxNotFoundError: If tmux is not installed
            TmuxSendError: If either step fails
        """
        await self._send("message", target, "-l", text)
        await self._send("Enter", target, "Enter")
        logger.debug(f"Sent {len(text)} chars to tmux target {target}")
