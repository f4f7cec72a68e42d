"""SQLite-backed diagnostic store."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

import aiosqlite

from ..config import PathLike, resolve_db_path
from ..models import TraceEvent

SCHEMA_PATH = Path(__file__).parent / "schema.sql"


def _to_db_time(value: datetime) -> str:
    """Fixed-width UTC text, so lexical order equals time order."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _row_to_event(row: aiosqlite.Row) -> TraceEvent:
    return TraceEvent(
        id=row["id"],
        event_type=row["event_type"],
        actor=row["actor"],
        data=json.loads(row["data"]),
        timestamp=datetime.fromisoformat(row["timestamp"]).astimezone(timezone.utc),
    )


class IStorage(Protocol):
    """Persistent store for diagnostics that never reach the dashboard views."""

    async def init(self) -> None:
        """Open the database and apply the schema."""
        ...

    async def close(self) -> None:
        """Close the database connection."""
        ...

    async def save_trace_event(self, event: TraceEvent) -> None:
        """Persist one trace event."""
        ...

    async def get_trace_events(
        self,
        after: datetime | None = None,
        event_types: list[str] | None = None,
        actor: str | None = None,
        limit: int = 100,
    ) -> list[TraceEvent]:
        """Trace events matching all given filters, newest first."""
        ...

    async def count_trace_events(self) -> dict[str, int]:
        """Number of stored trace events per event type."""
        ...

    async def clear(self) -> None:
        """Delete all diagnostics."""
        ...


class Storage:
    """aiosqlite implementation of IStorage."""

    def __init__(self, db_path: PathLike | None = None):
        self._db_path = resolve_db_path(db_path)
        self._conn: aiosqlite.Connection | None = None

    def _require_conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("Storage not initialized")
        return self._conn

    async def init(self) -> None:
        self._conn = await aiosqlite.connect(self._db_path)
        self._conn.row_factory = aiosqlite.Row
        await self._conn.executescript(SCHEMA_PATH.read_text(encoding="utf-8"))
        await self._conn.commit()

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    async def save_trace_event(self, event: TraceEvent) -> None:
        conn = self._require_conn()
        await conn.execute(
            "INSERT INTO trace_events (id, event_type, actor, data, timestamp) "
            "VALUES (?, ?, ?, ?, ?)",
            (
                event.id,
                event.event_type,
                event.actor,
                json.dumps(event.data, default=str),
                _to_db_time(event.timestamp),
            ),
        )
        await conn.commit()

    async def get_trace_events(
        self,
        after: datetime | None = None,
        event_types: list[str] | None = None,
        actor: str | None = None,
        limit: int = 100,
    ) -> list[TraceEvent]:
        conn = self._require_conn()

        clauses: list[str] = []
        params: list = []
        if after is not None:
            clauses.append("timestamp > ?")
            params.append(_to_db_time(after))
        if event_types:
            clauses.append(f"event_type IN ({', '.join('?' for _ in event_types)})")
            params.extend(event_types)
        if actor:
            clauses.append("actor = ?")
            params.append(actor)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        # rowid orders events recorded within the same microsecond
        query = (
            f"SELECT id, event_type, actor, data, timestamp FROM trace_events {where} "
            "ORDER BY timestamp DESC, rowid DESC LIMIT ?"
        )
        params.append(limit)

        async with conn.execute(query, params) as cursor:
            return [_row_to_event(row) for row in await cursor.fetchall()]

    async def count_trace_events(self) -> dict[str, int]:
        conn = self._require_conn()
        async with conn.execute(
            "SELECT event_type, COUNT(*) AS n FROM trace_events "
            "GROUP BY event_type ORDER BY event_type"
        ) as cursor:
            return {row["event_type"]: row["n"] for row in await cursor.fetchall()}

    async def clear(self) -> None:
        conn = self._require_conn()
        await conn.execute("DELETE FROM trace_events")
        await conn.commit()
