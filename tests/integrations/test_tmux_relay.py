"""Tests for the tmux send-keys relay."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from cc_slack.config.tmux import TmuxConfig
from cc_slack.integrations.tmux import TmuxNotFoundError, TmuxRelay, TmuxSendError

pytestmark = pytest.mark.unit

EXEC = "cc_slack.integrations.tmux.asyncio.create_subprocess_exec"


def make_process(returncode: int = 0, stderr: bytes = b"") -> AsyncMock:
    process = AsyncMock()
    process.returncode = returncode
    process.communicate.return_value = (b"", stderr)
    process.kill = MagicMock()
    return process


class TestSendKeys:
    @pytest.mark.asyncio
    async def test_sends_text_then_enter(self) -> None:
        relay = TmuxRelay()

        with patch(EXEC) as mock_exec:
            mock_exec.return_value = make_process()
            await relay.send_keys("%3", "run the tests")

        assert [c.args for c in mock_exec.call_args_list] == [
            ("tmux", "send-keys", "-t", "%3", "-l", "run the tests"),
            ("tmux", "send-keys", "-t", "%3", "Enter"),
        ]

    @pytest.mark.asyncio
    async def test_socket_name_and_command(self) -> None:
        relay = TmuxRelay(TmuxConfig(command="/usr/local/bin/tmux", socket_name="work"))

        with patch(EXEC) as mock_exec:
            mock_exec.return_value = make_process()
            await relay.send_keys("main:0.1", "y")

        assert mock_exec.call_args_list[0].args == (
            "/usr/local/bin/tmux", "-L", "work", "send-keys", "-t", "main:0.1", "-l", "y",
        )

    @pytest.mark.asyncio
    async def test_message_step_failure_skips_enter(self) -> None:
        relay = TmuxRelay()

        with patch(EXEC) as mock_exec:
            mock_exec.return_value = make_process(1, b"can't find pane: %3\n")
            with pytest.raises(TmuxSendError, match="can't find pane") as exc_info:
                await relay.send_keys("%3", "hello")

        assert exc_info.value.step == "message"
        assert exc_info.value.target == "%3"
        assert mock_exec.call_count == 1

    @pytest.mark.asyncio
    async def test_enter_step_failure(self) -> None:
        relay = TmuxRelay()

        with patch(EXEC) as mock_exec:
            mock_exec.side_effect = [make_process(), make_process(1, b"server exited")]
            with pytest.raises(TmuxSendError) as exc_info:
                await relay.send_keys("%3", "hello")

        assert exc_info.value.step == "Enter"

    @pytest.mark.asyncio
    async def test_missing_binary(self) -> None:
        relay = TmuxRelay()

        with patch(EXEC, side_effect=FileNotFoundError("tmux")):
            with pytest.raises(TmuxNotFoundError):
                await relay.send_keys("%3", "hello")

    @pytest.mark.asyncio
    async def test_timeout_kills_process(self) -> None:
        relay = TmuxRelay(TmuxConfig(timeout=0.01))
        process = make_process()

        async def hang():
            await asyncio.sleep(10)

        process.communicate.side_effect = hang

        with patch(EXEC, return_value=process):
            with pytest.raises(TmuxSendError, match="timed out"):
                await relay.send_keys("%3", "hello")

        process.kill.assert_called_once()
        process.wait.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_text_is_passed_verbatim(self) -> None:
        relay = TmuxRelay()
        text = "echo 'a; b' && C-c Enter"

        with patch(EXEC) as mock_exec:
            mock_exec.return_value = make_process()
            await relay.send_keys("%3", text)

        assert mock_exec.call_args_list[0].args[-1] == text


class TestAvailability:
    def test_is_available(self) -> None:
        with patch("cc_slack.integrations.tmux.shutil.which", return_value="/usr/bin/tmux"):
            assert TmuxRelay().is_available()

    def test_not_available(self) -> None:
        with patch("cc_slack.integrations.tmux.shutil.which", return_value=None):
            assert not TmuxRelay().is_available()
