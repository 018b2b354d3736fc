"""
Slack Socket Mode listener.

Holds one WebSocket connection to Slack (no public URL needed), acks every
Events API envelope, and hands app_mention and message events to the
InboundRelay. Each event runs in its own task so a slow tmux call never
stalls the connection's read loop.
"""

from __future__ import annotations

import asyncio
import logging

import aiohttp
from slack_sdk.errors import SlackApiError
from slack_sdk.socket_mode.aiohttp import SocketModeClient
from slack_sdk.socket_mode.request import SocketModeRequest
from slack_sdk.socket_mode.response import SocketModeResponse
from slack_sdk.web.async_client import AsyncWebClient

from cc_slack.bot.relay import ChatEvent, InboundRelay

logger = logging.getLogger(__name__)

RELAYED_EVENT_TYPES = frozenset({"app_mention", "message"})


class SocketModeListener:
    """Owns the Socket Mode connection and the per-event relay tasks."""

    def __init__(
        self,
        app_token: str,
        bot_token: str,
        relay: InboundRelay,
        client: SocketModeClient | None = None,
    ) -> None:
        """
        Initialize the listener.

        Args:
            app_token: App-level token (xapp-...)
            bot_token: Bot token (xoxb-...)
            relay: Receives every relayed event
            client: Pre-built Socket Mode client, used by tests
        """
        self.relay = relay
        self._client = client or SocketModeClient(
            app_token=app_token,
            web_client=AsyncWebClient(token=bot_token),
        )
        self._background_tasks: set[asyncio.Task] = set()
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def _track_task(self, coro) -> asyncio.Task:
        """Create a tracked task that logs exceptions on completion."""
        task = asyncio.create_task(coro)
        self._background_tasks.add(task)

        def _on_done(t: asyncio.Task) -> None:
            self._background_tasks.discard(t)
            if not t.cancelled() and t.exception():
                logger.error(f"relay task failed: {t.exception()}")

        task.add_done_callback(_on_done)
        return task

    async def _handle_request(self, client: SocketModeClient, req: SocketModeRequest) -> None:
        """Socket Mode request listener."""
        # Slack redelivers envelopes that are not acked within 3 seconds.
        await client.send_socket_mode_response(SocketModeResponse(envelope_id=req.envelope_id))

        if req.type != "events_api":
            return

        event = req.payload.get("event") or {}
        if event.get("type") not in RELAYED_EVENT_TYPES:
            return

        self._track_task(self.relay.handle_event(ChatEvent.from_slack(event)))

    async def start(self) -> None:
        """Resolve the bot's own user ID and connect."""
        if self._running:
            return

        try:
            auth = await self._client.web_client.auth_test()
            self.relay.bot_user_id = auth.get("user_id", "") or self.relay.bot_user_id
            logger.info(f"Slack bot connected as {auth.get('user', '')} ({self.relay.bot_user_id})")
        except (SlackApiError, aiohttp.ClientError) as e:
            logger.warning(f"auth.test failed, bot's own messages filtered by bot_id only: {e}")

        self._client.socket_mode_request_listeners.append(self._handle_request)
        await self._client.connect()
        self._running = True
        logger.info(f"Socket Mode listener started (allowed_user={self.relay.allowed_user})")

    async def stop(self) -> None:
        """Close the connection and wait for in-flight relay tasks."""
        if not self._running:
            return
        self._running = False

        await self._client.disconnect()
        await self._client.close()

        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)

        logger.info("Socket Mode listener stopped")
