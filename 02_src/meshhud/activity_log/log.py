"""ActivityLog implementation."""

from collections import deque

from ..config import ACTIVITY_LOG_CAPACITY
from ..models import LogEntry


class ActivityLog:
    """Bounded, most-recent-first record of reconciliation events."""

    def __init__(self, capacity: int = ACTIVITY_LOG_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._entries: deque[LogEntry] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._entries.maxlen

    def append(self, entry: LogEntry) -> None:
        """Insert at the front; the oldest entry falls off when full."""
        self._entries.appendleft(entry)

    def entries(self) -> tuple[LogEntry, ...]:
        """Entries, most recent first."""
        return tuple(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
