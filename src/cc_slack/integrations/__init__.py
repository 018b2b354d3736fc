"""
Boundary adapters for external services.

- slack: Slack Web API client (chat.postMessage)
- tmux: send-keys relay into a tmux pane
"""

from cc_slack.integrations.slack import ChatGateway, SlackAPIError, SlackClient
from cc_slack.integrations.tmux import (
    TerminalRelay,
    TmuxError,
    TmuxNotFoundError,
    TmuxRelay,
    TmuxSendError,
)

__all__ = [
    "ChatGateway",
    "SlackAPIError",
    "SlackClient",
    "TerminalRelay",
    "TmuxError",
    "TmuxNotFoundError",
    "TmuxRelay",
    "TmuxSendError",
]
