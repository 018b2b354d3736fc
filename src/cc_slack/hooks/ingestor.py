"""
Hook ingestor.

Turns one decoded hook event into one Slack post. The first post for a
session starts a thread and its ts is recorded; every later event for that
session replies in the same thread.
"""

from __future__ import annotations

import asyncio
import logging

from cc_slack.hooks.events import HookEvent
from cc_slack.hooks.formatting import compose_message
from cc_slack.integrations.slack import ChatGateway, SlackAPIError
from cc_slack.sessions.registry import SessionRegistry
from cc_slack.sessions.transcripts.claude import scan_transcript

logger = logging.getLogger(__name__)


class HookIngestor:
    """
    Posts hook events to Slack, threading them per session.

    Concurrent first events for the same session can both see no thread and
    both start one; the last registry write wins. Events are not serialized
    per session.
    """

    def __init__(
        self,
        gateway: ChatGateway,
        channel: str,
        registry: SessionRegistry,
        mention_user_id: str = "",
        transcript_delay: float = 0.5,
    ) -> None:
        """
        Initialize the ingestor.

        Args:
            gateway: Where messages are posted
            channel: Slack channel (or user ID for a DM)
            registry: Session to thread mapping
            mention_user_id: User to @-mention in every message
            transcript_delay: Seconds to wait before reading the transcript;
                Claude Code may still be flushing it when the hook fires
        """
        self.gateway = gateway
        self.channel = channel
        self.registry = registry
        self.mention_user_id = mention_user_id
        self.transcript_delay = transcript_delay

    def compose(self, event: HookEvent, prompt: str, response: str, is_reply: bool) -> str:
        """Build the message text including any mention prefix."""
        return compose_message(
            event, prompt, response, is_reply, self.channel, self.mention_user_id
        )

    async def handle(self, event: HookEvent) -> str:
        """
        Post a hook event to Slack.

        Args:
            event: Decoded hook event

        Returns:
            The ts of the posted message

        Raises:
            SlackAPIError: If the post fails; the registry is left untouched
        """
        if self.transcript_delay > 0:
            await asyncio.sleep(self.transcript_delay)

        prompt, response = await asyncio.to_thread(scan_transcript, event.transcript_path)

        thread_ts = self.registry.get(event.session_id) if event.session_id else ""
        is_reply = bool(thread_ts)
        text = self.compose(event, prompt, response, is_reply)

        try:
            posted_ts = await self.gateway.post_message(self.channel, text, thread_ts)
        except SlackAPIError as e:
            logger.error(
                f"failed to send slack message: {e}",
                extra={"session_id": event.session_id, "hook_event_name": event.hook_event_name},
            )
            raise

        # The thread anchor is write-once: replies never move it.
        if event.session_id and not thread_ts and posted_ts:
            self.registry.set(event.session_id, posted_ts, event.tmux_pane)
            logger.info(
                f"Started thread {posted_ts} for session {event.session_id}"
                + (f" (tmux {event.tmux_pane})" if event.tmux_pane else "")
            )
        else:
            logger.debug(
                f"Posted {event.hook_event_name} for session {event.session_id or '-'}"
                f" (reply={is_reply})"
            )

        return posted_ts
