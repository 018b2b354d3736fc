"""Configuration for relaying chat replies into tmux panes."""

from __future__ import annotations

from pydantic import BaseModel, Field


class TmuxConfig(BaseModel):
    """Configuration for the tmux terminal relay.

    Unlike a spawning backend, the relay talks to the user's own tmux
    server, so no socket is set unless one is configured explicitly.
    """

    command: str = Field(
        default="tmux",
        description="Path or name of the tmux binary.",
    )
    socket_name: str | None = Field(
        default=None,
        description="Optional tmux socket name (passed as -L <socket_name>).",
    )
    timeout: float = Field(
        default=10.0,
        gt=0,
        description="Timeout in seconds for each send-keys invocation.",
    )
