"""Pytest configuration and shared fixtures for cc-slack tests."""

import json
import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

from cc_slack.config.app import BridgeConfig
from cc_slack.integrations.slack import SlackAPIError
from cc_slack.sessions.registry import SessionRegistry


class FakeGateway:
    """Records every post; returns a fixed ts or raises a configured error."""

    def __init__(self, return_ts: str = "111.222", error: Exception | None = None) -> None:
        self.return_ts = return_ts
        self.error = error
        self.calls: list[dict[str, str]] = []

    @property
    def last(self) -> dict[str, str]:
        return self.calls[-1]

    async def post_message(self, channel: str, text: str, thread_ts: str = "") -> str:
        self.calls.append({"channel": channel, "text": text, "thread_ts": thread_ts})
        if self.error:
            raise self.error
        return self.return_ts


class FakeTerminal:
    """Records send_keys calls; optionally fails."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.sent: list[tuple[str, str]] = []

    async def send_keys(self, target: str, text: str) -> None:
        if self.error:
            raise self.error
        self.sent.append((target, text))


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def write_transcript(temp_dir: Path) -> Callable[..., str]:
    """Write JSONL transcript records and return the file path."""

    def _write(*records: dict[str, Any] | str, name: str = "transcript.jsonl") -> str:
        path = temp_dir / name
        lines = [r if isinstance(r, str) else json.dumps(r) for r in records]
        path.write_text("".join(line + "\n" for line in lines))
        return str(path)

    return _write


def user_record(content: Any) -> dict[str, Any]:
    return {"type": "user", "message": {"role": "user", "content": content}}


def assistant_record(*blocks: dict[str, Any]) -> dict[str, Any]:
    return {"type": "assistant", "message": {"role": "assistant", "content": list(blocks)}}


def text_block(text: str) -> dict[str, Any]:
    return {"type": "text", "text": text}


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def failing_gateway() -> FakeGateway:
    return FakeGateway(error=SlackAPIError("slack API error: channel_not_found"))


@pytest.fixture
def fake_terminal() -> FakeTerminal:
    return FakeTerminal()


@pytest.fixture
def default_config() -> BridgeConfig:
    """Create a BridgeConfig with Slack credentials for testing."""
    return BridgeConfig(slack={"bot_token": "xoxb-test", "channel": "C123"})
