"""Core data models for Mesh HUD."""

from .activity import LogEntry, Severity
from .connection import ConnectionState, InvalidTransitionError, can_transition
from .nodes import MeshEvent, Node, NodeRemoved, NodeUpdated, Transport
from .snapshot import SnapshotView
from .tracing import TraceEvent

__all__ = [
    # Nodes
    "Transport",
    "Node",
    "NodeUpdated",
    "NodeRemoved",
    "MeshEvent",
    # Activity
    "LogEntry",
    "Severity",
    # Connection
    "ConnectionState",
    "InvalidTransitionError",
    "can_transition",
    # Snapshot
    "SnapshotView",
    # Tracing
    "TraceEvent",
]
