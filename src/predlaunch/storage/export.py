"""Parquet export of the notification log."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection


def _where(launch_id: str | None, event_type: str | None) -> tuple[str, list[Any]]:
    clauses, params = [], []
    if launch_id:
        clauses.append("launch_id = ?")
        params.append(launch_id)
    if event_type:
        clauses.append("event_type = ?")
        params.append(event_type)
    return (" WHERE " + " AND ".join(clauses) if clauses else ""), params


def export_events_to_parquet(
    conn: DuckDBPyConnection,
    output_path: str | Path,
    launch_id: str | None = None,
    event_type: str | None = None,
) -> int:
    """Write notifications in log order to a Parquet file, optionally narrowed
    to one launch and/or one event type. Returns the number of rows written."""
    where, params = _where(launch_id, event_type)
    target = Path(output_path).resolve()
    target.parent.mkdir(parents=True, exist_ok=True)
    rel = conn.sql(f"SELECT id, launch_id, event_type, ts, payload FROM launch_events{where} ORDER BY id", params=params)
    rel.write_parquet(str(target))
    return conn.execute(f"SELECT COUNT(*) FROM launch_events{where}", params).fetchone()[0]
