"""Tracing and diagnostics data models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class TraceEvent:
    """A single diagnostic event (decode failure, reconnect, failed poll)."""

    id: str
    event_type: str  # e.g. "frame_decode_failed", "connection_state_changed"
    actor: str  # component that recorded it
    data: dict
    timestamp: datetime
