"""
Slack message formatting for hook events.

Builds the text body posted for each hook event: a header naming the event,
tool details and the permission dialog's choices for permission requests,
the prompt that started the turn, and the assistant's latest response.
"""

from __future__ import annotations

import json
from typing import Any

from cc_slack.hooks.events import FILE_TOOLS, HookEvent, HookEventType, ToolName
from cc_slack.hooks.mention import format_mention, resolve_mention_target

PROMPT_MAX_CHARS = 100
DETAIL_MAX_CHARS = 200

# Claude Code's question dialog always offers these after the tool's own options.
QUESTION_TRAILING_OPTIONS = ("Type something.", "Chat about this")

# The permission dialog choices are fixed by the Claude Code UI.
BASH_CHOICES = ("Yes", "Yes, and don't ask again for this session", "No")
EDIT_CHOICES = ("Yes", "Yes, allow all edits during this session", "No")


def truncate(s: str, n: int) -> str:
    """Flatten newlines to spaces and cap to n characters, adding "..." if cut."""
    s = s.replace("\n", " ")
    if len(s) <= n:
        return s
    return s[:n] + "..."


def quote(s: str) -> str:
    """Double-quote a string, escaping quotes, backslashes and control characters."""
    return json.dumps(s, ensure_ascii=False)


def format_numbered_options(labels: list[str] | tuple[str, ...]) -> str:
    return "\n".join(f"{i}. {label}" for i, label in enumerate(labels, start=1))


def format_ask_user_question(tool_input: dict[str, Any]) -> str:
    """
    Render AskUserQuestion input as question text followed by numbered options.

    Each question becomes its own block; blocks are newline-joined. Questions
    without text are skipped, and option entries without a string label are
    ignored.
    """
    questions = tool_input.get("questions")
    if not isinstance(questions, list) or not questions:
        return ""

    parts: list[str] = []
    for question in questions:
        if not isinstance(question, dict):
            continue
        text = question.get("question")
        if not isinstance(text, str) or not text:
            continue

        labels: list[str] = []
        options = question.get("options")
        if isinstance(options, list):
            for option in options:
                if isinstance(option, dict) and isinstance(option.get("label"), str):
                    labels.append(option["label"])
        labels.extend(QUESTION_TRAILING_OPTIONS)

        parts.append(f"{text}\n{format_numbered_options(labels)}")

    return "\n".join(parts)


def format_tool_input(tool_name: str, tool_input: Any) -> str:
    """
    Extract the most relevant field from a tool's input.

    Returns:
        The shell command for Bash, the file path for Read/Write/Edit, the
        rendered questions for AskUserQuestion, otherwise ""
    """
    if not isinstance(tool_input, dict):
        return ""

    tool = ToolName.parse(tool_name)
    if tool is ToolName.BASH:
        command = tool_input.get("command")
        return command if isinstance(command, str) else ""
    if tool in FILE_TOOLS:
        file_path = tool_input.get("file_path")
        return file_path if isinstance(file_path, str) else ""
    if tool is ToolName.ASK_USER_QUESTION:
        return format_ask_user_question(tool_input)
    return ""


def permission_choices(tool_name: str) -> str:
    """Return the permission dialog's numbered choices for a tool."""
    tool = ToolName.parse(tool_name)
    if tool is ToolName.ASK_USER_QUESTION:
        # options are already part of the tool input
        return ""
    if tool is ToolName.BASH:
        return format_numbered_options(BASH_CHOICES)
    return format_numbered_options(EDIT_CHOICES)


def _blockquote(text: str) -> str:
    return text.replace("\n", "\n> ")


def build_message(event: HookEvent, prompt: str, response: str, is_reply: bool) -> str:
    """
    Format the Slack text for a hook event.

    Args:
        event: The hook event
        prompt: Last user prompt from the transcript
        response: Last assistant text from the transcript
        is_reply: True when posting into an existing thread; the prompt line
            is omitted since the thread's parent already shows it

    Returns:
        Message text
    """
    lines: list[str] = []

    if event.event_type is HookEventType.PERMISSION_REQUEST:
        lines.append(f"[PermissionRequest] {event.tool_name}")
        detail = format_tool_input(event.tool_name, event.tool_input)
        if detail:
            lines.append(f"> {truncate(detail, DETAIL_MAX_CHARS)}")
        choices = permission_choices(event.tool_name)
        if choices:
            lines.append(f"> {_blockquote(choices)}")
    else:
        lines.append(f"[{event.hook_event_name}]")

    if not is_reply:
        lines.append(f"Prompt: {quote(truncate(prompt, PROMPT_MAX_CHARS))}")

    if response and not event.is_question:
        lines.append(f"Response: {_blockquote(response)}")

    return "\n".join(lines)


def compose_message(
    event: HookEvent,
    prompt: str,
    response: str,
    is_reply: bool,
    channel: str,
    mention_user_id: str = "",
) -> str:
    """Build the message text, prefixed with a mention when one applies."""
    text = build_message(event, prompt, response, is_reply)
    target = resolve_mention_target(mention_user_id, channel)
    if target:
        text = f"{format_mention(target)} {text}"
    return text
