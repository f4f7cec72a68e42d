"""Mesh HUD: live state reconciliation for the service mesh dashboard."""

from .activity_log import ActivityLog
from .app import Application, IApplication
from .config import Settings
from .directory import INodeDirectory, NodeDirectory, reduce
from .ingest import DecodeError, DecodeErrorKind, EventIngestor, IEventIngestor, decode_frame
from .models import (
    ConnectionState,
    InvalidTransitionError,
    LogEntry,
    MeshEvent,
    Node,
    NodeRemoved,
    NodeUpdated,
    Severity,
    SnapshotView,
    TraceEvent,
    Transport,
)
from .poller import ISnapshotPoller, SnapshotPoller
from .storage import IStorage, Storage
from .tracker import ITracker, Tracker
from .transport import ConnectionSupervisor, IConnectionSupervisor

__all__ = [
    # Application
    "Application",
    "IApplication",
    "Settings",
    # Models
    "Transport",
    "Node",
    "NodeUpdated",
    "NodeRemoved",
    "MeshEvent",
    "LogEntry",
    "Severity",
    "ConnectionState",
    "InvalidTransitionError",
    "SnapshotView",
    "TraceEvent",
    # Components
    "INodeDirectory",
    "NodeDirectory",
    "reduce",
    "ActivityLog",
    "DecodeError",
    "DecodeErrorKind",
    "decode_frame",
    "IEventIngestor",
    "EventIngestor",
    "IConnectionSupervisor",
    "ConnectionSupervisor",
    "ISnapshotPoller",
    "SnapshotPoller",
    "IStorage",
    "Storage",
    "ITracker",
    "Tracker",
]
