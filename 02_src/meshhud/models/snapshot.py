"""Snapshot poller view model."""

from dataclasses import dataclass
from datetime import datetime

from .nodes import Node


@dataclass(frozen=True)
class SnapshotView:
    """Full point-in-time membership list from the last successful poll.

    Independent of the event-reconciled NodeDirectory; the two may disagree
    between polls.
    """

    nodes: tuple[Node, ...] = ()
    fetched_at: datetime | None = None

    @property
    def loaded(self) -> bool:
        return self.fetched_at is not None

    @property
    def live_sessions(self) -> int:
        return sum(node.active_sessions for node in self.nodes)

    @property
    def agent_nodes(self) -> tuple[Node, ...]:
        return tuple(node for node in self.nodes if node.is_agent)

    @property
    def system_nodes(self) -> tuple[Node, ...]:
        return tuple(node for node in self.nodes if not node.is_agent)
