"""Application bootstrap and lifecycle management."""

from typing import Protocol

import httpx

from .activity_log import ActivityLog
from .config import Settings
from .directory import NodeDirectory
from .ingest import EventIngestor
from .logging_config import get_logger
from .poller import SnapshotPoller
from .storage import IStorage, Storage
from .tracker import ITracker, Tracker
from .transport import ConnectionSupervisor

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle of one dashboard session."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    async def reset(self) -> None:
        """Start a new session: resubscribe and fold from empty."""
        ...


class Application:
    """One dashboard session: owns the only NodeDirectory and ActivityLog."""

    def __init__(
        self,
        settings: Settings | None = None,
        events_transport: httpx.AsyncBaseTransport | None = None,
        nodes_transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._settings = settings or Settings.from_env()
        self._events_transport = events_transport
        self._nodes_transport = nodes_transport

        # In-memory session state, readable before start()
        self._directory = NodeDirectory()
        self._activity_log = ActivityLog()

        # Components (will be initialized in start())
        self._storage: IStorage | None = None
        self._tracker: ITracker | None = None
        self._ingestor: EventIngestor | None = None
        self._supervisor: ConnectionSupervisor | None = None
        self._poller: SnapshotPoller | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting mesh dashboard session")

        # 1. Storage (no dependencies)
        self._storage = Storage(self._settings.db_path)
        await self._storage.init()
        logger.info("Storage initialized")

        # 2. Tracker (diagnostic sink, depends on Storage)
        self._tracker = Tracker(self._storage)

        # 3. EventIngestor (sole writer of Directory + ActivityLog)
        self._ingestor = EventIngestor(
            directory=self._directory,
            activity_log=self._activity_log,
            tracker=self._tracker,
        )

        # 4. ConnectionSupervisor (feeds the ingestor)
        self._supervisor = ConnectionSupervisor(
            url=self._settings.events_url,
            ingestor=self._ingestor,
            tracker=self._tracker,
            base_delay=self._settings.reconnect_base_delay,
            max_delay=self._settings.reconnect_max_delay,
            max_retries=self._settings.reconnect_max_retries,
            connect_timeout=self._settings.connect_timeout,
            transport=self._events_transport,
        )
        await self._supervisor.connect()
        logger.info("Subscribed to %s", self._settings.events_url)

        # 5. SnapshotPoller (independent view)
        self._poller = SnapshotPoller(
            url=self._settings.nodes_url,
            tracker=self._tracker,
            interval=self._settings.poll_interval,
            timeout=self._settings.connect_timeout,
            transport=self._nodes_transport,
        )
        await self._poller.start()
        logger.info("Polling %s every %ss", self._settings.nodes_url, self._settings.poll_interval)
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order; every release runs even if one fails."""
        try:
            if self._poller:
                await self._poller.stop()
        finally:
            try:
                if self._supervisor:
                    await self._supervisor.close()
            finally:
                if self._storage:
                    await self._storage.close()
                    logger.info("Storage closed")

    async def reset(self) -> None:
        """Start a new session boundary.

        The subscription is closed before the directory and activity log are
        cleared and reopened afterwards, so the directory stays the fold of
        every event received since the reset.
        """
        if self._supervisor:
            await self._supervisor.close()

        self._directory.clear()
        self._activity_log.clear()
        if self._poller:
            self._poller.reset()
        if self._storage:
            await self._storage.clear()
            logger.info("Storage cleared")

        if self._supervisor:
            await self._supervisor.connect()
        logger.info("Reset complete")

    async def __aenter__(self) -> "Application":
        try:
            await self.start()
        except BaseException:
            await self.stop()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def directory(self) -> NodeDirectory:
        """Event-reconciled node directory (read-only for callers)."""
        return self._directory

    @property
    def activity_log(self) -> ActivityLog:
        """Recent reconciliation events, most recent first."""
        return self._activity_log

    @property
    def storage(self) -> IStorage:
        """Get storage instance."""
        if not self._storage:
            raise RuntimeError("Application not started")
        return self._storage

    @property
    def supervisor(self) -> ConnectionSupervisor:
        """Get connection supervisor instance."""
        if not self._supervisor:
            raise RuntimeError("Application not started")
        return self._supervisor

    @property
    def poller(self) -> SnapshotPoller:
        """Get snapshot poller instance."""
        if not self._poller:
            raise RuntimeError("Application not started")
        return self._poller
