"""Notification log append and query."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

    from predlaunch.models.events import EventBase


def append_event(conn: DuckDBPyConnection, event: EventBase) -> None:
    """Append one notification. The full event is kept as JSON payload."""
    conn.execute(
        "INSERT INTO launch_events (launch_id, event_type, ts, payload) VALUES (?, ?, ?, ?)",
        [event.launch_id, event.event_type, event.ts, event.model_dump_json()],
    )


class EventLogSink:
    """EventSink writing to the launch_events table.

    When the connection is shared with a DuckDBLaunchStore, pass its ``lock``
    so inserts never land inside another caller's open transaction.
    """

    def __init__(self, conn: DuckDBPyConnection, lock: threading.RLock | None = None) -> None:
        self.conn = conn
        self.lock = lock or threading.RLock()

    def emit(self, event: EventBase) -> None:
        with self.lock:
            append_event(self.conn, event)


def list_events(conn: DuckDBPyConnection, launch_id: str | None = None, limit: int = 100) -> list[dict[str, Any]]:
    """Most recent notifications first."""
    if launch_id:
        rows = conn.execute(
            "SELECT id, launch_id, event_type, ts, payload FROM launch_events WHERE launch_id = ? ORDER BY id DESC LIMIT ?",
            [launch_id, limit],
        ).fetchall()
    else:
        rows = conn.execute(
            "SELECT id, launch_id, event_type, ts, payload FROM launch_events ORDER BY id DESC LIMIT ?",
            [limit],
        ).fetchall()
    columns = ["id", "launch_id", "event_type", "ts", "payload"]
    return [dict(zip(columns, r)) for r in rows]


def log_stats(conn: DuckDBPyConnection) -> dict[str, Any]:
    """Return notification log statistics: total count, ts range, count by event type."""
    total = conn.execute("SELECT COUNT(*) FROM launch_events").fetchone()[0]
    range_row = conn.execute("SELECT MIN(ts), MAX(ts) FROM launch_events").fetchone()
    by_type = conn.execute(
        "SELECT event_type, COUNT(*) AS cnt FROM launch_events GROUP BY event_type ORDER BY cnt DESC, event_type"
    ).fetchall()
    return {
        "total_events": total,
        "min_ts": range_row[0],
        "max_ts": range_row[1],
        "by_type": [{"event_type": r[0], "count": r[1]} for r in by_type],
    }
