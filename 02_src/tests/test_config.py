"""Tests for Settings and path helpers."""

import pytest

from meshhud.config import (
    DEFAULT_DB_PATH,
    DEFAULT_EVENTS_URL,
    DEFAULT_NODES_URL,
    PROJECT_ROOT,
    Settings,
    resolve_db_path,
)

MESH_ENV = [
    "MESH_EVENTS_URL",
    "MESH_NODES_URL",
    "MESH_POLL_INTERVAL",
    "MESH_RECONNECT_BASE_DELAY",
    "MESH_RECONNECT_MAX_DELAY",
    "MESH_RECONNECT_MAX_RETRIES",
    "MESH_CONNECT_TIMEOUT",
    "DATABASE_URL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in MESH_ENV:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestResolveDbPath:
    def test_default(self):
        assert resolve_db_path(None) == DEFAULT_DB_PATH

    def test_memory(self):
        assert resolve_db_path(":memory:") == ":memory:"

    def test_relative_is_project_rooted(self):
        assert resolve_db_path("03_data/x.db") == PROJECT_ROOT / "03_data" / "x.db"


class TestSettingsFromEnv:
    """Tests for Settings.from_env()."""

    def test_defaults(self, clean_env):
        settings = Settings.from_env()
        assert settings.events_url == DEFAULT_EVENTS_URL
        assert settings.nodes_url == DEFAULT_NODES_URL
        assert settings.poll_interval == 5.0
        assert settings.reconnect_max_retries == 10
        assert settings.db_path == DEFAULT_DB_PATH

    def test_overrides(self, clean_env):
        clean_env.setenv("MESH_EVENTS_URL", "http://mesh:1/events")
        clean_env.setenv("MESH_POLL_INTERVAL", "0.5")
        clean_env.setenv("MESH_RECONNECT_MAX_RETRIES", "0")
        clean_env.setenv("DATABASE_URL", ":memory:")

        settings = Settings.from_env()

        assert settings.events_url == "http://mesh:1/events"
        assert settings.poll_interval == 0.5
        assert settings.reconnect_max_retries == 0
        assert settings.db_path == ":memory:"

    def test_invalid_number(self, clean_env):
        clean_env.setenv("MESH_POLL_INTERVAL", "fast")
        with pytest.raises(ValueError, match="MESH_POLL_INTERVAL"):
            Settings.from_env()
