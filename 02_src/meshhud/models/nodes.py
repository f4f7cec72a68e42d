"""Mesh node and membership event models."""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class Transport(str, Enum):
    """Transport a node serves MCP traffic on."""

    SSE = "sse"
    STREAMABLE = "streamable"


@dataclass(frozen=True)
class Node:
    """Latest announced attributes of a mesh node.

    ``is_blessed`` is ``None`` when the source did not report trust at all
    (the snapshot path); the event path always carries a boolean.
    """

    service_name: str
    transport: Transport
    port: int
    active_sessions: int
    is_blessed: bool | None = False
    pid: int | None = None
    addr: str | None = None
    sampling_supported: bool = False

    @property
    def is_agent(self) -> bool:
        """Dynamically spawned agent nodes are named ``node-*``."""
        return self.service_name.startswith("node-")


@dataclass(frozen=True)
class NodeUpdated:
    """A node announced itself; replaces any previous record for its name."""

    node: Node


@dataclass(frozen=True)
class NodeRemoved:
    """A node left the mesh."""

    service_name: str


MeshEvent = Union[NodeUpdated, NodeRemoved]
