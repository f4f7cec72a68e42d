"""Connection lifecycle models."""

from enum import Enum


class ConnectionState(str, Enum):
    """Lifecycle state of the push-event subscription."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    RETRYING = "retrying"
    UNAVAILABLE = "unavailable"  # retry ceiling reached


class InvalidTransitionError(RuntimeError):
    """Raised when the supervisor is asked for a transition it does not allow."""

    def __init__(self, current: ConnectionState, target: ConnectionState):
        super().__init__(f"invalid transition {current.value} -> {target.value}")
        self.current = current
        self.target = target


ALLOWED_TRANSITIONS: dict[ConnectionState, frozenset[ConnectionState]] = {
    ConnectionState.DISCONNECTED: frozenset({ConnectionState.CONNECTING}),
    ConnectionState.CONNECTING: frozenset(
        {ConnectionState.CONNECTED, ConnectionState.RETRYING}
    ),
    ConnectionState.CONNECTED: frozenset({ConnectionState.RETRYING}),
    ConnectionState.RETRYING: frozenset(
        {ConnectionState.CONNECTING, ConnectionState.UNAVAILABLE}
    ),
    ConnectionState.UNAVAILABLE: frozenset({ConnectionState.CONNECTING}),
}


def can_transition(current: ConnectionState, target: ConnectionState) -> bool:
    """Teardown to DISCONNECTED is allowed from every state."""
    if target is ConnectionState.DISCONNECTED:
        return True
    return target in ALLOWED_TRANSITIONS[current]
