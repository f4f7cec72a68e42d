"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_DB_PATH = DATA_DIR / "mesh_hud.db"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

DEFAULT_EVENTS_URL = "http://localhost:15000/mesh/events"
DEFAULT_NODES_URL = "http://localhost:15000/mesh/nodes"

ACTIVITY_LOG_CAPACITY = 10

DATA_DIR.mkdir(parents=True, exist_ok=True)
LOGS_DIR.mkdir(parents=True, exist_ok=True)


PathLike = Union[str, Path]


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve DATABASE_URL to an absolute path."""
    if not env_value:
        return DEFAULT_DB_PATH

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


@dataclass
class Settings:
    """Runtime settings for one dashboard session."""

    events_url: str = DEFAULT_EVENTS_URL
    nodes_url: str = DEFAULT_NODES_URL
    poll_interval: float = 5.0
    reconnect_base_delay: float = 0.5
    reconnect_max_delay: float = 30.0
    reconnect_max_retries: int = 10  # 0 = retry forever
    connect_timeout: float = 10.0
    db_path: PathLike = DEFAULT_DB_PATH

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from MESH_* environment variables."""
        return cls(
            events_url=os.getenv("MESH_EVENTS_URL", DEFAULT_EVENTS_URL),
            nodes_url=os.getenv("MESH_NODES_URL", DEFAULT_NODES_URL),
            poll_interval=_env_float("MESH_POLL_INTERVAL", 5.0),
            reconnect_base_delay=_env_float("MESH_RECONNECT_BASE_DELAY", 0.5),
            reconnect_max_delay=_env_float("MESH_RECONNECT_MAX_DELAY", 30.0),
            reconnect_max_retries=_env_int("MESH_RECONNECT_MAX_RETRIES", 10),
            connect_timeout=_env_float("MESH_CONNECT_TIMEOUT", 10.0),
            db_path=resolve_db_path(os.getenv("DATABASE_URL")),
        )
