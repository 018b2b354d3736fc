"""
Transcript readers.

Only Claude Code's JSONL transcript format is supported.
"""

from cc_slack.sessions.transcripts.claude import UNKNOWN_PROMPT, scan_transcript

__all__ = [
    "UNKNOWN_PROMPT",
    "scan_transcript",
]
