"""Observability API routes."""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field

from ...app import Application


class TraceEventResponse(BaseModel):
    """Response model for trace event."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    event_type: str = Field(alias="eventType")
    actor: str
    data: dict[str, Any]
    timestamp: datetime


def create_observability_router(app: Application) -> APIRouter:
    """Create observability router."""
    router = APIRouter(prefix="/api", tags=["observability"])

    @router.get("/trace-events", response_model=list[TraceEventResponse])
    async def get_trace_events(
        after: str | None = Query(None, description="ISO timestamp filter"),
        limit: int = Query(100, ge=1, le=1000),
        event_type: str | None = Query(None, description="Filter by event type"),
        actor: str | None = Query(None, description="Filter by actor"),
    ) -> list[TraceEventResponse]:
        """Get diagnostic trace events with optional filters."""
        after_dt = None
        if after:
            try:
                after_dt = datetime.fromisoformat(after)
            except ValueError:
                raise HTTPException(
                    status_code=400, detail="Invalid after timestamp format"
                )

        try:
            storage = app.storage
        except RuntimeError as e:
            raise HTTPException(status_code=503, detail=str(e))

        events = await storage.get_trace_events(
            after=after_dt,
            event_types=[event_type] if event_type else None,
            actor=actor,
            limit=limit,
        )

        return [
            TraceEventResponse(
                id=e.id,
                event_type=e.event_type,
                actor=e.actor,
                data=e.data,
                timestamp=e.timestamp,
            )
            for e in events
        ]

    @router.get("/trace-events/summary", response_model=dict[str, int])
    async def get_trace_event_summary() -> dict[str, int]:
        """Count of recorded diagnostics per event type."""
        try:
            storage = app.storage
        except RuntimeError as e:
            raise HTTPException(status_code=503, detail=str(e))

        return await storage.count_trace_events()

    return router
