"""Strict decoding of mesh wire payloads into typed events.

The producer serializes heartbeats with camelCase keys. Every frame on the
push stream is a JSON object carrying exactly one of ``nodeUpdated`` (a
heartbeat) or ``nodeRemoved`` (a service name). The snapshot endpoint
returns a JSON array of heartbeats.

Scalars are validated strictly: ``"9000"`` is not a port and ``1`` is not a
boolean. Keys the producer adds over time (``pid``, ``addr``, ...) are
accepted when known and ignored otherwise.
"""

import json
from enum import Enum
from typing import Annotated

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
)

from ..models import MeshEvent, Node, NodeRemoved, NodeUpdated, Transport

NonEmptyStr = Annotated[StrictStr, Field(min_length=1)]
NonNegativeInt = Annotated[StrictInt, Field(ge=0)]


class DecodeErrorKind(str, Enum):
    """Classification of rejected payloads."""

    INVALID_JSON = "invalid_json"
    INVALID_SHAPE = "invalid_shape"
    EMPTY_EVENT = "empty_event"
    AMBIGUOUS_EVENT = "ambiguous_event"


class DecodeError(ValueError):
    """A wire payload that does not match the mesh contract."""

    def __init__(self, kind: DecodeErrorKind, detail: str):
        super().__init__(f"{kind.value}: {detail}")
        self.kind = kind
        self.detail = detail


class NodePayload(BaseModel):
    """Wire shape of a node heartbeat."""

    # wire keys only: snake_case names are not accepted
    model_config = ConfigDict(extra="ignore", frozen=True)

    service_name: StrictStr = Field(alias="serviceName", min_length=1)
    transport: Transport
    port: StrictInt = Field(ge=0, le=65535)
    active_sessions: StrictInt = Field(alias="activeSessions", ge=0)
    is_blessed: StrictBool | None = Field(None, alias="isBlessed")
    pid: NonNegativeInt | None = None
    addr: StrictStr | None = None
    sampling_supported: StrictBool = Field(False, alias="samplingSupported")

    def to_node(self, blessed_default: bool | None = False) -> Node:
        """Convert to a domain Node; ``blessed_default`` fills a missing trust flag."""
        return Node(
            service_name=self.service_name,
            transport=self.transport,
            port=self.port,
            active_sessions=self.active_sessions,
            is_blessed=blessed_default if self.is_blessed is None else self.is_blessed,
            pid=self.pid,
            addr=self.addr,
            sampling_supported=self.sampling_supported,
        )


class EventFrame(BaseModel):
    """Wire shape of a push-stream frame, before variant checks."""

    model_config = ConfigDict(extra="ignore")

    node_updated: NodePayload | None = Field(None, alias="nodeUpdated")
    node_removed: NonEmptyStr | None = Field(None, alias="nodeRemoved")


_snapshot_adapter = TypeAdapter(list[NodePayload])


def _load_json(raw: str | bytes):
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(DecodeErrorKind.INVALID_JSON, str(e)) from e


def decode_frame(raw: str | bytes) -> MeshEvent:
    """Decode one push-stream frame.

    Raises:
        DecodeError: if the frame is not valid JSON, does not match the
            schema, or does not carry exactly one event variant.
    """
    payload = _load_json(raw)
    if not isinstance(payload, dict):
        raise DecodeError(
            DecodeErrorKind.INVALID_SHAPE,
            f"expected a JSON object, got {type(payload).__name__}",
        )

    try:
        frame = EventFrame.model_validate(payload)
    except ValidationError as e:
        raise DecodeError(DecodeErrorKind.INVALID_SHAPE, str(e)) from e

    has_update = frame.node_updated is not None
    has_removal = frame.node_removed is not None

    if has_update and has_removal:
        raise DecodeError(
            DecodeErrorKind.AMBIGUOUS_EVENT,
            "frame carries both nodeUpdated and nodeRemoved",
        )
    if has_update:
        # producer serializes isBlessed with a false default
        return NodeUpdated(node=frame.node_updated.to_node(blessed_default=False))
    if has_removal:
        return NodeRemoved(service_name=frame.node_removed)
    raise DecodeError(
        DecodeErrorKind.EMPTY_EVENT, "frame carries neither nodeUpdated nor nodeRemoved"
    )


def decode_snapshot(raw: str | bytes) -> tuple[Node, ...]:
    """Decode a snapshot response body into nodes.

    A single invalid element rejects the whole snapshot. Trust is left as
    ``None`` when the body does not report it.
    """
    payload = _load_json(raw)
    if not isinstance(payload, list):
        raise DecodeError(
            DecodeErrorKind.INVALID_SHAPE,
            f"expected a JSON array, got {type(payload).__name__}",
        )

    try:
        heartbeats = _snapshot_adapter.validate_python(payload)
    except ValidationError as e:
        raise DecodeError(DecodeErrorKind.INVALID_SHAPE, str(e)) from e

    return tuple(hb.to_node(blessed_default=None) for hb in heartbeats)
