"""NodeDirectory implementation."""

from typing import Iterator, Mapping, Protocol

from ..models import MeshEvent, Node, NodeRemoved, NodeUpdated


def reduce(state: Mapping[str, Node], event: MeshEvent) -> dict[str, Node]:
    """Fold one event into a directory state, returning a new state.

    Last write wins per service name. The input mapping is never mutated.
    """
    next_state = dict(state)
    if isinstance(event, NodeUpdated):
        next_state[event.node.service_name] = event.node
    elif isinstance(event, NodeRemoved):
        next_state.pop(event.service_name, None)
    else:
        raise TypeError(f"unsupported mesh event: {event!r}")
    return next_state


class INodeDirectory(Protocol):
    """Current mapping from node identity to its latest known attributes."""

    def upsert(self, node: Node) -> None:
        """Insert or wholly replace the entry for node.service_name."""
        ...

    def remove(self, service_name: str) -> None:
        """Delete the entry if present."""
        ...

    def apply(self, event: MeshEvent) -> None:
        """Apply a membership event."""
        ...

    def snapshot(self) -> tuple[Node, ...]:
        """Read-only view of present nodes."""
        ...


class NodeDirectory:
    """In-memory node directory, written only by the event ingestor."""

    def __init__(self):
        self._nodes: dict[str, Node] = {}

    def upsert(self, node: Node) -> None:
        """Insert or wholly replace the entry for node.service_name."""
        self._nodes[node.service_name] = node

    def remove(self, service_name: str) -> None:
        """Delete the entry if present; absent keys are a no-op."""
        self._nodes.pop(service_name, None)

    def apply(self, event: MeshEvent) -> None:
        """Apply a membership event in place."""
        self._nodes = reduce(self._nodes, event)

    def snapshot(self) -> tuple[Node, ...]:
        """Present nodes in insertion order."""
        return tuple(self._nodes.values())

    def get(self, service_name: str) -> Node | None:
        """Get a node by service name."""
        return self._nodes.get(service_name)

    def clear(self) -> None:
        """Forget every node (session reset)."""
        self._nodes.clear()

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, service_name: object) -> bool:
        return service_name in self._nodes

    def __iter__(self) -> Iterator[Node]:
        return iter(self.snapshot())
