"""EventIngestor implementation."""

from typing import Protocol

from ..activity_log import ActivityLog
from ..directory import INodeDirectory
from ..logging_config import get_logger
from ..models import LogEntry, MeshEvent, NodeRemoved, NodeUpdated, Severity
from ..tracker import ITracker
from .decoder import DecodeError, decode_frame

logger = get_logger(__name__)

FRAME_EXCERPT_CHARS = 200


class IEventIngestor(Protocol):
    """Reconciles raw push-stream frames into the directory and activity log."""

    async def handle_frame(self, raw: str) -> MeshEvent | None:
        """Decode one frame and apply it. Returns None if it was dropped."""
        ...


def describe(event: MeshEvent) -> LogEntry:
    """Build the activity log entry for a reconciled event."""
    if isinstance(event, NodeUpdated):
        node = event.node
        return LogEntry(
            message=f"Node Up: {node.service_name} ({node.transport.value}:{node.port})",
            severity=Severity.INFO,
        )
    if isinstance(event, NodeRemoved):
        return LogEntry(
            message=f"Node Down: {event.service_name}",
            severity=Severity.WARNING,
        )
    raise TypeError(f"unsupported mesh event: {event!r}")


class EventIngestor:
    """Sole writer of the session's NodeDirectory and ActivityLog."""

    def __init__(
        self,
        directory: INodeDirectory,
        activity_log: ActivityLog,
        tracker: ITracker,
    ):
        self._directory = directory
        self._activity_log = activity_log
        self._tracker = tracker
        self.frames_applied = 0
        self.frames_dropped = 0

    async def handle_frame(self, raw: str) -> MeshEvent | None:
        """Decode one frame and apply it. Returns None if it was dropped."""
        try:
            event = decode_frame(raw)
        except DecodeError as e:
            self.frames_dropped += 1
            logger.warning("Dropping mesh frame (%s): %s", e.kind.value, e.detail)
            await self._tracker.track(
                event_type="frame_decode_failed",
                actor="event_ingestor",
                data={
                    "kind": e.kind.value,
                    "detail": e.detail[:FRAME_EXCERPT_CHARS],
                    "frame": raw[:FRAME_EXCERPT_CHARS],
                },
            )
            return None

        self._directory.apply(event)
        self._activity_log.append(describe(event))
        self.frames_applied += 1
        logger.debug("Applied mesh event: %s", event)
        return event
