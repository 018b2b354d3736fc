"""
One-shot notification command.

Meant to be used directly as a Claude Code hook command when no daemon is
running: reads the hook event from stdin and posts a single, unthreaded
message.
"""

import asyncio
import json
import sys

import click
from pydantic import ValidationError

from cc_slack.config.app import load_config
from cc_slack.hooks.events import HookEvent
from cc_slack.hooks.formatting import compose_message
from cc_slack.integrations.slack import SlackAPIError, SlackClient
from cc_slack.sessions.transcripts.claude import scan_transcript


@click.command()
@click.pass_context
def notify(ctx: click.Context) -> None:
    """Post the hook event read from stdin as a standalone Slack message."""
    try:
        config = load_config(ctx.obj.get("config_path"))
        config.require_slack()
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    try:
        payload = json.loads(sys.stdin.read())
        if not isinstance(payload, dict):
            raise ValueError("hook payload must be a JSON object")
        event = HookEvent.model_validate(payload)
    except (ValueError, ValidationError) as e:
        raise click.ClickException(f"failed to parse hook input: {e}") from e

    client = SlackClient(
        token=config.slack.bot_token,
        base_url=config.slack.api_base_url,
        timeout=config.slack.timeout,
    )
    prompt, response = scan_transcript(event.transcript_path)
    text = compose_message(
        event,
        prompt,
        response,
        is_reply=False,
        channel=config.slack.channel,
        mention_user_id=config.slack.user_id,
    )
    try:
        asyncio.run(client.post_message(config.slack.channel, text))
    except SlackAPIError as e:
        raise click.ClickException(f"failed to send slack message: {e}") from e
