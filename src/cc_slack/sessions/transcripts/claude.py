"""
Claude Code transcript reader.

Claude Code appends one JSON record per line to the session transcript:
- {"type": "user", "message": {"role": "user", "content": "<prompt>"}}
- {"type": "user", "message": {"role": "user", "content": [<tool_result>...]}}
- {"type": "assistant", "message": {"role": "assistant", "content": [
      {"type": "thinking", ...}, {"type": "text", "text": "..."}, ...]}}

Only string user content is a prompt; list user content echoes tool results.
"""

from __future__ import annotations

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)

UNKNOWN_PROMPT = "(unknown)"


def _last_text_block(content: Any) -> str:
    """Return the last non-blank text block of an assistant message, or ""."""
    if not isinstance(content, list):
        return ""
    text = ""
    for block in content:
        if not isinstance(block, dict) or block.get("type") != "text":
            continue
        value = block.get("text")
        if isinstance(value, str) and value.strip():
            text = value
    return text


def scan_transcript(path: str) -> tuple[str, str]:
    """
    Read a transcript and return the last user prompt and assistant response.

    The file is scanned once in order and the most recent match of each kind
    wins. A missing or unreadable file is not an error.

    Args:
        path: Path to the JSONL transcript

    Returns:
        (prompt, response); prompt is "(unknown)" and response is "" when
        nothing usable was found
    """
    if not path:
        return UNKNOWN_PROMPT, ""

    prompt = ""
    response = ""
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            for line in f:
                try:
                    entry = json.loads(line)
                except (json.JSONDecodeError, RecursionError):
                    continue
                if not isinstance(entry, dict):
                    continue
                message = entry.get("message")
                if not isinstance(message, dict):
                    continue

                entry_type = entry.get("type")
                role = message.get("role")
                content = message.get("content")
                if entry_type == "user" and role == "user":
                    if isinstance(content, str):
                        prompt = content
                elif entry_type == "assistant" and role == "assistant":
                    text = _last_text_block(content)
                    if text:
                        response = text
    except OSError as e:
        logger.debug(f"Transcript not readable: {path}: {e}")
        return UNKNOWN_PROMPT, ""

    return prompt or UNKNOWN_PROMPT, response
