"""Pytest configuration and fixtures."""

import asyncio
import json
import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))


def node_payload(service_name: str = "node-1", **overrides) -> dict:
    """Wire-shaped heartbeat as the producer sends it."""
    payload = {
        "serviceName": service_name,
        "transport": "sse",
        "port": 9000,
        "activeSessions": 2,
        "isBlessed": True,
    }
    payload.update(overrides)
    return payload


def updated_frame(service_name: str = "node-1", **overrides) -> str:
    """A nodeUpdated push frame."""
    return json.dumps({"nodeUpdated": node_payload(service_name, **overrides)})


def removed_frame(service_name: str = "node-1") -> str:
    """A nodeRemoved push frame."""
    return json.dumps({"nodeRemoved": service_name})


def sse_body(*frames: str) -> bytes:
    """Encode frames as a text/event-stream body."""
    return "".join(f"data: {frame}\n\n" for frame in frames).encode("utf-8")


async def wait_until(predicate, timeout: float = 2.0, interval: float = 0.01) -> None:
    """Poll until predicate() is true or fail the test."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            pytest.fail("condition not met before timeout")
        await asyncio.sleep(interval)


@pytest_asyncio.fixture
async def storage():
    """Create in-memory storage for testing."""
    from meshhud.storage import Storage

    st = Storage(":memory:")
    await st.init()
    yield st
    await st.close()


@pytest.fixture
def tracker(storage):
    """Create Tracker with storage."""
    from meshhud.tracker import Tracker

    return Tracker(storage=storage)


@pytest.fixture
def directory():
    """Create an empty NodeDirectory."""
    from meshhud.directory import NodeDirectory

    return NodeDirectory()


@pytest.fixture
def activity_log():
    """Create an empty ActivityLog."""
    from meshhud.activity_log import ActivityLog

    return ActivityLog()


@pytest.fixture
def ingestor(directory, activity_log, tracker):
    """Create EventIngestor over the directory and activity log fixtures."""
    from meshhud.ingest import EventIngestor

    return EventIngestor(
        directory=directory,
        activity_log=activity_log,
        tracker=tracker,
    )
