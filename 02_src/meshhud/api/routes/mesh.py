"""Mesh view API routes (read-only)."""

from datetime import datetime

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from ...app import Application
from ...models import LogEntry, Node


class NodeResponse(BaseModel):
    """Response model for a mesh node."""

    model_config = ConfigDict(populate_by_name=True)

    service_name: str = Field(alias="serviceName")
    transport: str
    port: int
    active_sessions: int = Field(alias="activeSessions")
    is_blessed: bool | None = Field(alias="isBlessed")
    pid: int | None = None
    addr: str | None = None
    sampling_supported: bool = Field(alias="samplingSupported")

    @classmethod
    def from_node(cls, node: Node) -> "NodeResponse":
        return cls(
            service_name=node.service_name,
            transport=node.transport.value,
            port=node.port,
            active_sessions=node.active_sessions,
            is_blessed=node.is_blessed,
            pid=node.pid,
            addr=node.addr,
            sampling_supported=node.sampling_supported,
        )


class LogEntryResponse(BaseModel):
    """Response model for an activity log entry."""

    id: str
    message: str
    severity: str
    timestamp: datetime

    @classmethod
    def from_entry(cls, entry: LogEntry) -> "LogEntryResponse":
        return cls(
            id=entry.id,
            message=entry.message,
            severity=entry.severity.value,
            timestamp=entry.timestamp,
        )


class ConnectionResponse(BaseModel):
    """Response model for the push subscription state."""

    model_config = ConfigDict(populate_by_name=True)

    state: str
    url: str
    attempts: int
    last_error: str | None = Field(alias="lastError")


class SnapshotResponse(BaseModel):
    """Response model for the snapshot poller view."""

    model_config = ConfigDict(populate_by_name=True)

    loaded: bool
    fetched_at: datetime | None = Field(alias="fetchedAt")
    last_error: str | None = Field(alias="lastError")
    node_count: int = Field(alias="nodeCount")
    live_sessions: int = Field(alias="liveSessions")
    agent_nodes: int = Field(alias="agentNodes")
    system_nodes: int = Field(alias="systemNodes")
    nodes: list[NodeResponse]


def create_mesh_router(app: Application) -> APIRouter:
    """Create mesh view router."""
    router = APIRouter(prefix="/api/mesh", tags=["mesh"])

    @router.get("/nodes", response_model=list[NodeResponse])
    async def get_nodes() -> list[NodeResponse]:
        """Event-reconciled node directory."""
        return [NodeResponse.from_node(node) for node in app.directory.snapshot()]

    @router.get("/activity", response_model=list[LogEntryResponse])
    async def get_activity() -> list[LogEntryResponse]:
        """Recent reconciliation events, most recent first."""
        return [LogEntryResponse.from_entry(e) for e in app.activity_log.entries()]

    @router.get("/connection", response_model=ConnectionResponse)
    async def get_connection() -> ConnectionResponse:
        """State of the push-event subscription."""
        try:
            supervisor = app.supervisor
        except RuntimeError as e:
            raise HTTPException(status_code=503, detail=str(e))

        return ConnectionResponse(
            state=supervisor.state.value,
            url=supervisor.url,
            attempts=supervisor.attempts,
            last_error=supervisor.last_error,
        )

    @router.get("/snapshot", response_model=SnapshotResponse)
    async def get_snapshot() -> SnapshotResponse:
        """Last full membership snapshot; independent of /nodes."""
        try:
            poller = app.poller
        except RuntimeError as e:
            raise HTTPException(status_code=503, detail=str(e))

        view = poller.view
        return SnapshotResponse(
            loaded=view.loaded,
            fetched_at=view.fetched_at,
            last_error=poller.last_error,
            node_count=len(view.nodes),
            live_sessions=view.live_sessions,
            agent_nodes=len(view.agent_nodes),
            system_nodes=len(view.system_nodes),
            nodes=[NodeResponse.from_node(node) for node in view.nodes],
        )

    return router
