"""Hook endpoint: Claude Code POSTs every configured hook event here."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import ValidationError

from cc_slack.hooks.events import HookEvent
from cc_slack.integrations.slack import SlackAPIError

if TYPE_CHECKING:
    from cc_slack.servers.http import HTTPServer

logger = logging.getLogger(__name__)


def create_hooks_router(server: HTTPServer) -> APIRouter:
    """Create hooks router.

    Args:
        server: HTTPServer instance for accessing the ingestor.

    Returns:
        Configured APIRouter.
    """
    router = APIRouter(tags=["hooks"])

    @router.post("/hook")
    async def receive_hook(request: Request) -> Response:
        """
        Post a hook event to Slack.

        Request body:
            {
                "hook_event_name": "Stop",
                "session_id": "...",
                "transcript_path": "/path/to/transcript.jsonl",
                "tool_name": "Bash",
                "tool_input": {...}
            }

        Returns:
            200 with an empty body; 400 for an undecodable body; 500 when
            Slack rejects the post
        """
        body = await request.body()
        try:
            payload = json.loads(body)
            if not isinstance(payload, dict):
                raise ValueError("hook payload must be a JSON object")
            event = HookEvent.model_validate(payload)
        except (ValueError, ValidationError) as e:
            logger.warning(f"Rejected hook payload: {e}")
            raise HTTPException(status_code=400, detail="invalid JSON") from e

        try:
            await server.ingestor.handle(event)
        except SlackAPIError as e:
            raise HTTPException(status_code=500, detail="slack post failed") from e

        return Response(status_code=200)

    return router
