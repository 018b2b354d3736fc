"""
Claude Code hook handling.

- events: HookEvent model with HookEventType / ToolName variants
- formatting: Slack message text for a hook event
- mention: who to @-mention
- ingestor: hook event -> Slack post -> session registry
"""

from cc_slack.hooks.events import HookEvent, HookEventType, ToolName
from cc_slack.hooks.formatting import build_message, compose_message, format_tool_input, truncate
from cc_slack.hooks.mention import resolve_mention_target

__all__ = [
    "HookEvent",
    "HookEventType",
    "ToolName",
    "build_message",
    "compose_message",
    "format_tool_input",
    "resolve_mention_target",
    "truncate",
]
