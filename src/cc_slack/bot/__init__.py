"""
Slack to tmux reply relay.

- relay: decides whether a Slack event is forwarded and where
- listener: Socket Mode connection feeding events into the relay
"""

from cc_slack.bot.relay import ChatEvent, InboundRelay, strip_mention

__all__ = [
    "ChatEvent",
    "InboundRelay",
    "strip_mention",
]
