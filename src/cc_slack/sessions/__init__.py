"""Session correlation: session ID to Slack thread and tmux pane."""

from cc_slack.sessions.lifecycle import RegistrySweeper
from cc_slack.sessions.registry import SessionEntry, SessionRegistry

__all__ = [
    "RegistrySweeper",
    "SessionEntry",
    "SessionRegistry",
]
