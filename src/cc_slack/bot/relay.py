"""
Inbound relay.

A reply posted in one of our session threads is typed into the tmux pane
of the Claude Code session that owns the thread. Everything else is
dropped: bot traffic, top-level messages, unknown threads, and users other
than the allowed one.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

from cc_slack.integrations.tmux import TerminalRelay, TmuxError
from cc_slack.sessions.registry import SessionRegistry

logger = logging.getLogger(__name__)

MENTION_RE = re.compile(r"^<@[A-Z0-9]+>\s*")


def strip_mention(text: str) -> str:
    """Remove one leading <@USERID> mention and the whitespace after it."""
    return MENTION_RE.sub("", text, count=1)


@dataclass
class ChatEvent:
    """The fields of a Slack app_mention or message event the relay needs."""

    kind: str
    user: str = ""
    thread_ts: str = ""
    text: str = ""
    bot_id: str = ""
    subtype: str = ""

    @classmethod
    def from_slack(cls, event: dict[str, Any]) -> ChatEvent:
        """Build from an Events API inner event payload."""

        def _str(key: str) -> str:
            value = event.get(key)
            return value if isinstance(value, str) else ""

        return cls(
            kind=_str("type"),
            user=_str("user"),
            thread_ts=_str("thread_ts"),
            text=_str("text"),
            bot_id=_str("bot_id"),
            subtype=_str("subtype"),
        )


class InboundRelay:
    """Filters Slack thread replies and forwards them to tmux."""

    def __init__(
        self,
        registry: SessionRegistry,
        terminal: TerminalRelay,
        allowed_user: str = "",
        bot_user_id: str = "",
    ) -> None:
        """
        Initialize the relay.

        Args:
            registry: Session registry used for the thread -> pane lookup
            terminal: Where accepted text is sent
            allowed_user: Only this user's replies are forwarded (empty: anyone)
            bot_user_id: The bot's own user ID; its messages are ignored
        """
        self.registry = registry
        self.terminal = terminal
        self.allowed_user = allowed_user
        self.bot_user_id = bot_user_id

    async def handle_event(self, event: ChatEvent) -> bool:
        """
        Forward one Slack event if it passes every filter.

        Returns:
            True if text was sent to tmux
        """
        logger.debug(
            f"{event.kind}: user={event.user} thread_ts={event.thread_ts} text={event.text!r}"
        )

        # Our own posts come back as message events.
        if event.bot_id or event.subtype or (self.bot_user_id and event.user == self.bot_user_id):
            return False

        if not event.thread_ts:
            logger.debug("skipped: not in a thread")
            return False

        tmux_target, found = self.registry.get_by_thread_ts(event.thread_ts)
        if not found:
            logger.debug(f"skipped: thread_ts={event.thread_ts} not found in registry")
            return False
        if not tmux_target:
            logger.debug(f"skipped: tmux target is empty for thread_ts={event.thread_ts}")
            return False

        if self.allowed_user and event.user != self.allowed_user:
            logger.info(f"skipped: user {event.user} not allowed (allowed={self.allowed_user})")
            return False

        text = strip_mention(event.text)
        if not text:
            logger.debug("skipped: text is empty after stripping mention")
            return False

        logger.info(f"sending to tmux target={tmux_target} text={text!r}")
        try:
            await self.terminal.send_keys(tmux_target, text)
        except TmuxError as e:
            logger.error(f"tmux send-keys failed: {e}")
            return False
        return True
