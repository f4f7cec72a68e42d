"""Event ingestion module."""

from .decoder import (
    DecodeError,
    DecodeErrorKind,
    EventFrame,
    NodePayload,
    decode_frame,
    decode_snapshot,
)
from .ingestor import EventIngestor, IEventIngestor, describe

__all__ = [
    "DecodeError",
    "DecodeErrorKind",
    "EventFrame",
    "NodePayload",
    "decode_frame",
    "decode_snapshot",
    "EventIngestor",
    "IEventIngestor",
    "describe",
]
