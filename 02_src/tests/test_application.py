"""Tests for Application."""

import asyncio

import httpx
import pytest

from conftest import node_payload, sse_body, updated_frame, wait_until
from meshhud.app import Application
from meshhud.config import Settings
from meshhud.models import ConnectionState


def make_settings(**overrides) -> Settings:
    settings = Settings(
        events_url="http://mesh.test/mesh/events",
        nodes_url="http://mesh.test/mesh/nodes",
        poll_interval=3600.0,
        reconnect_base_delay=0.001,
        reconnect_max_delay=0.01,
        reconnect_max_retries=1,
        db_path=":memory:",
    )
    for key, value in overrides.items():
        setattr(settings, key, value)
    return settings


def events_transport(*frames: str) -> httpx.MockTransport:
    """Serve the frames once, then hold the stream open."""
    release = asyncio.Event()

    async def stream():
        yield sse_body(*frames)
        await release.wait()

    def handler(request):
        return httpx.Response(200, headers={"content-type": "text/event-stream"}, content=stream())

    return httpx.MockTransport(handler)


def nodes_transport(*nodes: dict) -> httpx.MockTransport:
    return httpx.MockTransport(lambda request: httpx.Response(200, json=list(nodes)))


def make_app(frames=(), nodes=(), **overrides) -> Application:
    return Application(
        settings=make_settings(**overrides),
        events_transport=events_transport(*frames),
        nodes_transport=nodes_transport(*nodes),
    )


class TestApplicationStart:
    """Tests for Application.start()."""

    @pytest.mark.asyncio
    async def test_start_initializes_components(self):
        """Test that start initializes all components."""
        app = make_app()
        await app.start()
        try:
            assert app._storage is not None
            assert app._tracker is not None
            assert app._ingestor is not None
            assert app._supervisor is not None
            assert app._poller is not None
        finally:
            await app.stop()

    @pytest.mark.asyncio
    async def test_start_wires_dependencies(self):
        """Test that components share the session state and sink."""
        app = make_app()
        await app.start()
        try:
            assert app._tracker._storage is app._storage
            assert app._ingestor._directory is app.directory
            assert app._ingestor._activity_log is app.activity_log
            assert app._supervisor._ingestor is app._ingestor
        finally:
            await app.stop()

    @pytest.mark.asyncio
    async def test_start_creates_database_tables(self):
        app = make_app()
        await app.start()
        try:
            async with app._storage._conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table'"
            ) as cursor:
                tables = [row[0] for row in await cursor.fetchall()]
                assert "trace_events" in tables
        finally:
            await app.stop()

    def test_components_unavailable_before_start(self):
        app = make_app()
        with pytest.raises(RuntimeError):
            app.storage
        with pytest.raises(RuntimeError):
            app.supervisor
        with pytest.raises(RuntimeError):
            app.poller

    def test_views_readable_before_start(self):
        app = make_app()
        assert app.directory.snapshot() == ()
        assert app.activity_log.entries() == ()


class TestApplicationSession:
    """End-to-end tests over mocked producer endpoints."""

    @pytest.mark.asyncio
    async def test_both_views_populate_independently(self):
        app = make_app(
            frames=[updated_frame("node-a")],
            nodes=[node_payload("gw-1"), node_payload("node-b")],
        )
        async with app:
            await wait_until(lambda: "node-a" in app.directory)
            await wait_until(lambda: app.poller.view.loaded)

            assert [n.service_name for n in app.directory.snapshot()] == ["node-a"]
            assert [n.service_name for n in app.poller.view.nodes] == ["gw-1", "node-b"]
            assert app.activity_log.entries()[0].message == "Node Up: node-a (sse:9000)"
            assert app.supervisor.state is ConnectionState.CONNECTED

    @pytest.mark.asyncio
    async def test_unreachable_producer(self):
        """Test that a refused subscription parks as unavailable."""

        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        app = Application(
            settings=make_settings(),
            events_transport=httpx.MockTransport(refuse),
            nodes_transport=httpx.MockTransport(refuse),
        )
        async with app:
            await wait_until(lambda: app.supervisor.state is ConnectionState.UNAVAILABLE)
            await wait_until(lambda: app.poller.last_error is not None)

            assert app.directory.snapshot() == ()
            assert not app.poller.view.loaded

    @pytest.mark.asyncio
    async def test_reset_clears_state_and_diagnostics(self):
        app = make_app(frames=["{bad", updated_frame("node-a")], nodes=[node_payload("gw-1")])
        async with app:
            await wait_until(lambda: "node-a" in app.directory)
            await wait_until(lambda: app.poller.view.loaded)
            assert await app.storage.get_trace_events(event_types=["frame_decode_failed"])

            await app.reset()

            assert len(app.directory) == 0
            assert app.activity_log.entries() == ()
            assert not app.poller.view.loaded
            events = await app.storage.get_trace_events()
            assert [(e.event_type, e.data["to"]) for e in events] == [
                ("connection_state_changed", "connecting")
            ]

    @pytest.mark.asyncio
    async def test_reset_restarts_the_fold(self):
        """Test that after reset the directory holds exactly what arrived since."""
        release = asyncio.Event()
        served = []

        async def stream(frames):
            yield sse_body(*frames)
            await release.wait()

        def handler(request):
            served.append(request)
            if len(served) == 1:
                frames = [updated_frame("node-1")]
            else:
                frames = [updated_frame("node-2")]
            return httpx.Response(
                200, headers={"content-type": "text/event-stream"}, content=stream(frames)
            )

        app = Application(
            settings=make_settings(),
            events_transport=httpx.MockTransport(handler),
            nodes_transport=nodes_transport(),
        )
        async with app:
            await wait_until(lambda: "node-1" in app.directory)
            first_task = app.supervisor._task

            await app.reset()
            await wait_until(lambda: "node-2" in app.directory)

            assert len(served) == 2
            assert app.supervisor._task is not first_task
            assert app.supervisor.state is ConnectionState.CONNECTED
            assert [n.service_name for n in app.directory.snapshot()] == ["node-2"]
            assert [e.message for e in app.activity_log.entries()] == [
                "Node Up: node-2 (sse:9000)"
            ]
            release.set()


class TestApplicationStop:
    """Tests for Application.stop()."""

    @pytest.mark.asyncio
    async def test_stop_releases_everything(self):
        app = make_app(frames=[updated_frame("node-a")])
        await app.start()
        await wait_until(lambda: "node-a" in app.directory)

        await app.stop()

        assert app.supervisor.state is ConnectionState.DISCONNECTED
        assert app.supervisor._task is None
        assert app.poller._task is None
        assert app._storage._conn is None

    @pytest.mark.asyncio
    async def test_stop_without_start(self):
        app = make_app()
        await app.stop()

    @pytest.mark.asyncio
    async def test_context_manager_stops_on_error(self):
        app = make_app()
        with pytest.raises(ValueError):
            async with app:
                raise ValueError("boom")

        assert app.supervisor.state is ConnectionState.DISCONNECTED
        assert app._storage._conn is None
