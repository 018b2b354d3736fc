"""Who, if anyone, to @-mention in an outgoing notification."""

from __future__ import annotations

# Slack addresses a DM to a user by that user's ID, which starts with "U".
DIRECT_MESSAGE_PREFIX = "U"


def is_direct_message_channel(channel_id: str) -> bool:
    """Return True if the channel ID is a user ID, i.e. posts go to a DM."""
    return channel_id.startswith(DIRECT_MESSAGE_PREFIX)


def resolve_mention_target(explicit_user_id: str, channel_id: str) -> str | None:
    """
    Pick the user to mention.

    An explicitly configured user always wins. Posting into a DM mentions the
    DM's owner so the message still triggers a notification. Anything else
    gets no mention.
    """
    if explicit_user_id:
        return explicit_user_id
    if is_direct_message_channel(channel_id):
        return channel_id
    return None


def format_mention(user_id: str) -> str:
    return f"<@{user_id}>"
