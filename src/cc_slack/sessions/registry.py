"""
In-memory session registry.

Maps a Claude Code session ID to the Slack thread its notifications go to
and the tmux pane replies are sent to. Nothing is persisted; entries live
until the age-based sweep removes them or the process exits.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import timedelta


@dataclass
class SessionEntry:
    """One session's thread anchor and terminal target."""

    session_id: str
    thread_ts: str
    tmux_target: str = ""
    # Aging clock for eviction; reset on every write.
    created_at: float = field(default_factory=time.time)


class SessionRegistry:
    """
    Thread-safe map of session ID to SessionEntry.

    Every operation takes the same lock, so reads and writes are
    linearizable. The registry does not protect the thread anchor from
    being overwritten; callers that need write-once semantics check
    get() before set().
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, SessionEntry] = {}

    def get(self, session_id: str) -> str:
        """Return the thread_ts for a session, or "" if unknown."""
        with self._lock:
            entry = self._entries.get(session_id)
            return entry.thread_ts if entry else ""

    def get_entry(self, session_id: str) -> SessionEntry | None:
        """Return a copy of the full entry for a session."""
        with self._lock:
            entry = self._entries.get(session_id)
            return replace(entry) if entry else None

    def set(self, session_id: str, thread_ts: str, tmux_target: str = "") -> None:
        """Insert or replace the entry for a session and reset its age."""
        with self._lock:
            self._entries[session_id] = SessionEntry(
                session_id=session_id,
                thread_ts=thread_ts,
                tmux_target=tmux_target,
                created_at=self._clock(),
            )

    def get_by_thread_ts(self, thread_ts: str) -> tuple[str, bool]:
        """
        Reverse lookup from a Slack thread to its tmux target.

        Returns:
            (tmux_target, True) when a session owns the thread, ("", False) otherwise
        """
        with self._lock:
            for entry in self._entries.values():
                if entry.thread_ts == thread_ts:
                    return entry.tmux_target, True
        return "", False

    def clean_older_than(self, max_age: timedelta | float) -> int:
        """
        Remove entries written before now - max_age.

        Args:
            max_age: Maximum age as a timedelta or in seconds

        Returns:
            Number of entries removed
        """
        seconds = max_age.total_seconds() if isinstance(max_age, timedelta) else float(max_age)
        with self._lock:
            cutoff = self._clock() - seconds
            stale = [sid for sid, entry in self._entries.items() if entry.created_at < cutoff]
            for sid in stale:
                del self._entries[sid]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
