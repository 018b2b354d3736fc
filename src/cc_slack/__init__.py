"""cc-slack - Claude Code hook notifications in Slack threads.

Posts agent lifecycle events (stop, permission requests, completed tasks)
into one Slack thread per session, and relays thread replies back into the
agent's tmux pane.
"""

__version__ = "0.3.0"
