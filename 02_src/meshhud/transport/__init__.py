"""Push-event transport module."""

from .sse import SSE_HEADERS, SseParser, iter_frames
from .supervisor import ConnectionSupervisor, IConnectionSupervisor

__all__ = [
    "SSE_HEADERS",
    "SseParser",
    "iter_frames",
    "ConnectionSupervisor",
    "IConnectionSupervisor",
]
