"""SnapshotPoller module."""

from .poller import ISnapshotPoller, SnapshotPoller

__all__ = ["ISnapshotPoller", "SnapshotPoller"]
