"""ActivityLog module."""

from .log import ActivityLog

__all__ = ["ActivityLog"]
