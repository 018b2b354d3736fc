"""
Hook event model.

Claude Code POSTs one JSON object per hook invocation. The event name and
tool name arrive as free-form strings; they are mapped onto closed enums
with an UNKNOWN fallback so formatting can dispatch on known variants while
still displaying whatever name was sent.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class HookEventType(str, Enum):
    """Claude Code hook events this bridge knows how to label."""

    STOP = "Stop"
    SUBAGENT_STOP = "SubagentStop"
    PERMISSION_REQUEST = "PermissionRequest"
    NOTIFICATION = "Notification"
    TASK_COMPLETED = "TaskCompleted"
    USER_PROMPT_SUBMIT = "UserPromptSubmit"
    SESSION_START = "SessionStart"
    SESSION_END = "SessionEnd"
    PRE_COMPACT = "PreCompact"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, name: str) -> HookEventType:
        try:
            return cls(name)
        except ValueError:
            return cls.UNKNOWN


class ToolName(str, Enum):
    """Tools whose permission prompts get tool-specific formatting."""

    BASH = "Bash"
    READ = "Read"
    WRITE = "Write"
    EDIT = "Edit"
    ASK_USER_QUESTION = "AskUserQuestion"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, name: str) -> ToolName:
        try:
            return cls(name)
        except ValueError:
            return cls.UNKNOWN


FILE_TOOLS = frozenset({ToolName.READ, ToolName.WRITE, ToolName.EDIT})


class HookEvent(BaseModel):
    """A single hook invocation as received on POST /hook."""

    model_config = ConfigDict(extra="ignore")

    hook_event_name: str = Field(default="", description="Hook event name, e.g. 'Stop'")
    transcript_path: str = Field(default="", description="Path to the session JSONL transcript")
    session_id: str = Field(default="", description="Claude Code session ID")
    tool_name: str = Field(default="", description="Tool name (PermissionRequest only)")
    tool_input: Any = Field(default=None, description="Raw tool input (PermissionRequest only)")
    tmux_pane: str = Field(
        default="",
        description="tmux pane running the session ($TMUX_PANE), if the hook forwards it",
    )

    @field_validator(
        "hook_event_name", "transcript_path", "session_id", "tool_name", "tmux_pane", mode="before"
    )
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        """Treat JSON null like a missing field."""
        return "" if v is None else v

    @property
    def event_type(self) -> HookEventType:
        return HookEventType.parse(self.hook_event_name)

    @property
    def tool(self) -> ToolName:
        return ToolName.parse(self.tool_name)

    @property
    def is_question(self) -> bool:
        """True for a permission request raised by AskUserQuestion."""
        return (
            self.event_type is HookEventType.PERMISSION_REQUEST
            and self.tool is ToolName.ASK_USER_QUESTION
        )
