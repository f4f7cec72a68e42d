"""Tracker implementation for creating TraceEvents."""

import uuid
from datetime import datetime, timezone
from typing import Any, Protocol

from ..logging_config import get_logger
from ..models import TraceEvent
from ..storage import IStorage

logger = get_logger(__name__)


class ITracker(Protocol):
    """Diagnostic sink: records TraceEvents that are not shown to the user."""

    async def track(self, event_type: str, actor: str, data: dict[str, Any]) -> None:
        """Create TraceEvent and save to Storage."""
        ...


class Tracker:
    """Records diagnostics for the ingest, transport and polling loops.

    A failed write is logged and dropped: diagnostics must never stop the
    loop that reported them.
    """

    def __init__(self, storage: IStorage):
        self._storage = storage

    async def track(self, event_type: str, actor: str, data: dict[str, Any]) -> None:
        trace_event = TraceEvent(
            id=str(uuid.uuid4()),
            event_type=event_type,
            actor=actor,
            data=data,
            timestamp=datetime.now(timezone.utc),
        )
        try:
            await self._storage.save_trace_event(trace_event)
        except Exception as e:
            logger.error(
                "Failed to record %s from %s: %s",
                event_type,
                actor,
                e,
                extra={"context": {"event_type": event_type, "data": data}},
            )
