"""ConnectionSupervisor: lifecycle of the push-event subscription."""

import asyncio
import random
from typing import Protocol

import httpx

from ..ingest import IEventIngestor
from ..logging_config import get_logger
from ..models import ConnectionState, InvalidTransitionError, can_transition
from ..tracker import ITracker
from .sse import SSE_HEADERS, iter_frames

logger = get_logger(__name__)


class IConnectionSupervisor(Protocol):
    """Connect, detect failure, reconnect, tear down."""

    @property
    def state(self) -> ConnectionState:
        """Current lifecycle state."""
        ...

    async def connect(self) -> None:
        """Start (or restart after Unavailable) the subscription."""
        ...

    async def close(self) -> None:
        """Stop delivery and release the transport. Idempotent."""
        ...


class ConnectionSupervisor:
    """Owns the SSE subscription and feeds frames to the ingestor in order.

    Failed attempts are retried with exponential backoff and full jitter.
    After ``max_retries`` consecutive failures the supervisor parks in
    UNAVAILABLE until ``connect()`` is called again; ``max_retries=0``
    retries forever.
    """

    def __init__(
        self,
        url: str,
        ingestor: IEventIngestor,
        tracker: ITracker,
        base_delay: float = 0.5,
        max_delay: float = 30.0,
        max_retries: int = 10,
        connect_timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        rng: random.Random | None = None,
    ):
        self._url = url
        self._ingestor = ingestor
        self._tracker = tracker
        self._base_delay = base_delay
        self._max_delay = max_delay
        self._max_retries = max_retries
        self._connect_timeout = connect_timeout
        self._transport = transport
        self._rng = rng or random.Random()

        self._state = ConnectionState.DISCONNECTED
        self._client: httpx.AsyncClient | None = None
        self._task: asyncio.Task | None = None
        self._closing = False

        self.attempts = 0  # consecutive failures since the last open
        self.last_error: str | None = None

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def url(self) -> str:
        return self._url

    def backoff_delay(self, attempt: int) -> float:
        """Jittered delay before retry number ``attempt`` (1-based)."""
        ceiling = min(self._max_delay, self._base_delay * 2 ** (attempt - 1))
        return self._rng.uniform(0, ceiling)

    async def connect(self) -> None:
        """Start the subscription; no-op while one is already running."""
        if self._task and not self._task.done():
            return

        self._closing = False
        self.attempts = 0
        if self._client is None:
            self._client = httpx.AsyncClient(
                transport=self._transport,
                timeout=httpx.Timeout(self._connect_timeout, read=None),
            )

        await self._set_state(ConnectionState.CONNECTING)
        self._task = asyncio.create_task(self._run(), name="mesh-events")

    async def close(self) -> None:
        """Stop delivery and release the transport on every path."""
        self._closing = True
        task, self._task = self._task, None
        try:
            if task and not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
        finally:
            if self._client:
                await self._client.aclose()
                self._client = None

        if self._state is not ConnectionState.DISCONNECTED:
            await self._set_state(ConnectionState.DISCONNECTED)

    async def _run(self) -> None:
        """Reconnect loop. Exits on close() or when retries are exhausted."""
        while not self._closing:
            try:
                await self._stream_once()
                error = "stream closed by producer"
            except asyncio.CancelledError:
                raise
            except httpx.HTTPError as e:
                error = f"{type(e).__name__}: {e}"
            except Exception as e:
                logger.error("Mesh event stream failed: %s", e, exc_info=True)
                error = f"{type(e).__name__}: {e}"

            if self._closing:
                return

            self.attempts += 1
            self.last_error = error
            logger.warning(
                "Mesh event stream lost (attempt %s): %s", self.attempts, error
            )
            await self._tracker.track(
                event_type="transport_error",
                actor="connection_supervisor",
                data={"url": self._url, "error": error, "attempt": self.attempts},
            )
            await self._set_state(ConnectionState.RETRYING)

            if self._max_retries and self.attempts >= self._max_retries:
                logger.error(
                    "Giving up on %s after %s failed attempts", self._url, self.attempts
                )
                await self._set_state(ConnectionState.UNAVAILABLE)
                # connect() opens a fresh client
                client, self._client = self._client, None
                if client:
                    await client.aclose()
                return

            await asyncio.sleep(self.backoff_delay(self.attempts))
            if self._closing:
                return
            await self._set_state(ConnectionState.CONNECTING)

    async def _stream_once(self) -> None:
        """One subscription: open, then deliver frames until the stream ends."""
        async with self._client.stream("GET", self._url, headers=SSE_HEADERS) as response:
            response.raise_for_status()
            self.attempts = 0
            self.last_error = None
            await self._set_state(ConnectionState.CONNECTED)

            async for frame in iter_frames(response.aiter_lines()):
                if self._closing:
                    return
                await self._ingestor.handle_frame(frame)

    async def _set_state(self, target: ConnectionState) -> None:
        if not can_transition(self._state, target):
            raise InvalidTransitionError(self._state, target)

        previous, self._state = self._state, target
        logger.info("Mesh connection %s -> %s", previous.value, target.value)
        await self._tracker.track(
            event_type="connection_state_changed",
            actor="connection_supervisor",
            data={
                "from": previous.value,
                "to": target.value,
                "attempts": self.attempts,
                "error": self.last_error,
            },
        )
