"""Slack Web API client.

Only chat.postMessage is needed: the first message for a session starts a
thread, and later messages for the same session reply in it.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

logger = logging.getLogger(__name__)


class SlackAPIError(RuntimeError):
    """Raised when a Slack API call fails or Slack reports ok=false."""

    def __init__(self, message: str, error: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.error = error
        self.status_code = status_code


class ChatGateway(Protocol):
    """Anything that can post a message and return its thread anchor."""

    async def post_message(self, channel: str, text: str, thread_ts: str = "") -> str: ...


class SlackClient:
    """
    Minimal Slack Web API client authenticated with a bot token.

    Example usage:
        ```python
        client = SlackClient(token="xoxb-...")
        ts = await client.post_message("C123", "[Stop]")
        await client.post_message("C123", "[Stop]", thread_ts=ts)
        ```
    """

    def __init__(
        self,
        token: str,
        base_url: str = "https://slack.com/api",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the Slack client.

        Args:
            token: Bot token (xoxb-...)
            base_url: Web API base URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        self.token = token
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    def _get_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json; charset=utf-8",
            "Authorization": f"Bearer {self.token}",
        }

    async def post_message(self, channel: str, text: str, thread_ts: str = "") -> str:
        """
        Post a message, optionally as a thread reply.

        Args:
            channel: Channel or user ID
            text: Message text (Slack mrkdwn)
            thread_ts: Parent message ts; empty starts a new thread

        Returns:
            The ts of the posted message

        Raises:
            SlackAPIError: On transport failure, non-200 status, an
                undecodable body, or ok=false
        """
        payload: dict[str, Any] = {"channel": channel, "text": text}
        if thread_ts:
            payload["thread_ts"] = thread_ts

        url = f"{self.base_url.rstrip('/')}/chat.postMessage"
        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
            try:
                response = await client.post(url, headers=self._get_headers(), json=payload)
            except httpx.RequestError as e:
                raise SlackAPIError(f"slack request failed: {e}") from e

        if response.status_code != 200:
            raise SlackAPIError(
                f"slack API returned status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            result = response.json()
        except ValueError as e:
            raise SlackAPIError(f"failed to decode slack response: {e}") from e

        if not isinstance(result, dict):
            raise SlackAPIError("failed to decode slack response: not an object")
        if not result.get("ok"):
            error = result.get("error", "")
            raise SlackAPIError(f"slack API error: {error}", error=error)

        ts = result.get("ts", "")
        logger.debug(f"Posted to {channel} (ts={ts}, thread_ts={thread_ts or '-'})")
        return ts if isinstance(ts, str) else ""
