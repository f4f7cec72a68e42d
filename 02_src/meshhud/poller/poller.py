"""SnapshotPoller implementation."""

import asyncio
from datetime import datetime, timezone
from typing import Protocol

import httpx

from ..ingest import DecodeError, decode_snapshot
from ..logging_config import get_logger
from ..models import SnapshotView
from ..tracker import ITracker

logger = get_logger(__name__)


class ISnapshotPoller(Protocol):
    """Periodic full refresh of mesh membership."""

    @property
    def view(self) -> SnapshotView:
        """Result of the last successful fetch."""
        ...

    async def start(self) -> None:
        """Fetch now, then on every interval."""
        ...

    async def stop(self) -> None:
        """Cancel the timer and release the HTTP client."""
        ...

    async def poll_once(self) -> bool:
        """Fetch and replace the view. Returns False if the fetch failed."""
        ...


class SnapshotPoller:
    """Replaces its whole view on every successful fetch; never merges."""

    def __init__(
        self,
        url: str,
        tracker: ITracker,
        interval: float = 5.0,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._url = url
        self._tracker = tracker
        self._interval = interval
        self._timeout = timeout
        self._transport = transport

        self._view = SnapshotView()
        self._client: httpx.AsyncClient | None = None
        self._task: asyncio.Task | None = None
        self._running = False

        self.last_error: str | None = None

    @property
    def view(self) -> SnapshotView:
        return self._view

    async def start(self) -> None:
        """Fetch now, then on every interval."""
        if self._running:
            return

        self._running = True
        self._client = httpx.AsyncClient(transport=self._transport, timeout=self._timeout)
        self._task = asyncio.create_task(self._run(), name="mesh-snapshot")

    async def stop(self) -> None:
        """Cancel the timer and release the HTTP client."""
        self._running = False
        task, self._task = self._task, None
        try:
            if task:
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
        finally:
            if self._client:
                await self._client.aclose()
                self._client = None

    def reset(self) -> None:
        """Forget the current view (session reset)."""
        self._view = SnapshotView()
        self.last_error = None

    async def poll_once(self) -> bool:
        """Fetch and replace the view. Returns False if the fetch failed."""
        if not self._client:
            raise RuntimeError("SnapshotPoller not started")

        try:
            response = await self._client.get(
                self._url, headers={"Accept": "application/json"}
            )
            response.raise_for_status()
            nodes = decode_snapshot(response.content)
        except (httpx.HTTPError, DecodeError) as e:
            self.last_error = f"{type(e).__name__}: {e}"
            logger.warning("Snapshot fetch from %s failed: %s", self._url, e)
            await self._tracker.track(
                event_type="snapshot_fetch_failed",
                actor="snapshot_poller",
                data={"url": self._url, "error": self.last_error[:500]},
            )
            return False

        self._view = SnapshotView(nodes=nodes, fetched_at=datetime.now(timezone.utc))
        self.last_error = None
        logger.debug("Snapshot refreshed: %s nodes", len(nodes))
        return True

    async def _run(self) -> None:
        """Background timer for periodic fetches."""
        while self._running:
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("Snapshot poll error: %s", e, exc_info=True)

            await asyncio.sleep(self._interval)
