"""Launch row persistence - maps the phase-tagged state to nullable columns."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from predlaunch.models.launch import DiscoveryState, Launch, Phase, PredictState, SettledState

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

_COLUMNS = [
    "launch_id",
    "authority",
    "name",
    "symbol",
    "total_supply",
    "phase",
    "discovery_end",
    "predict_end",
    "created_at",
    "total_votes",
    "median_mcap",
    "total_locked",
    "settlement_value",
    "total_distributed",
]
_SELECT = f"SELECT {', '.join(_COLUMNS)} FROM launches"


def _state_columns(launch: Launch) -> list[Any]:
    """(phase, total_votes, median_mcap, total_locked, settlement_value, total_distributed)."""
    phase = launch.phase
    return [
        phase.value,
        launch.total_votes,
        launch.median_mcap,
        launch.total_locked if phase is not Phase.DISCOVERY else None,
        launch.settlement_value,
        launch.total_distributed if phase is Phase.SETTLED else None,
    ]


def _row_to_launch(row: tuple[Any, ...]) -> Launch:
    r = dict(zip(_COLUMNS, row))
    phase = Phase(r["phase"])
    if phase is Phase.DISCOVERY:
        state: DiscoveryState | PredictState | SettledState = DiscoveryState(total_votes=r["total_votes"])
    elif phase is Phase.PREDICT:
        state = PredictState(
            total_votes=r["total_votes"],
            median_mcap=r["median_mcap"],
            total_locked=r["total_locked"] or 0,
        )
    else:
        state = SettledState(
            total_votes=r["total_votes"],
            median_mcap=r["median_mcap"],
            total_locked=r["total_locked"] or 0,
            settlement_value=r["settlement_value"],
            total_distributed=int(r["total_distributed"] or 0),
        )
    return Launch(
        launch_id=r["launch_id"],
        authority=r["authority"],
        name=r["name"],
        symbol=r["symbol"],
        total_supply=r["total_supply"],
        discovery_end=r["discovery_end"],
        predict_end=r["predict_end"],
        created_at=r["created_at"],
        state=state,
    )


def insert_launch(conn: DuckDBPyConnection, launch: Launch) -> None:
    """Insert a new launch. Raises duckdb.ConstraintException if launch_id exists."""
    conn.execute(
        f"INSERT INTO launches ({', '.join(_COLUMNS)}) VALUES ({', '.join('?' * len(_COLUMNS))})",
        [
            launch.launch_id,
            launch.authority,
            launch.name,
            launch.symbol,
            launch.total_supply,
            launch.phase.value,
            launch.discovery_end,
            launch.predict_end,
            launch.created_at,
        ]
        + _state_columns(launch)[1:],
    )


def update_launch_state(conn: DuckDBPyConnection, launch: Launch) -> None:
    """Write the mutable (phase-dependent) columns of an existing launch."""
    conn.execute(
        """
        UPDATE launches SET
            phase = ?,
            total_votes = ?,
            median_mcap = ?,
            total_locked = ?,
            settlement_value = ?,
            total_distributed = ?
        WHERE launch_id = ?
        """,
        _state_columns(launch) + [launch.launch_id],
    )


def get_launch(conn: DuckDBPyConnection, launch_id: str) -> Launch | None:
    row = conn.execute(f"{_SELECT} WHERE launch_id = ?", [launch_id]).fetchone()
    return _row_to_launch(row) if row else None


def list_launches(conn: DuckDBPyConnection) -> list[Launch]:
    """All launches, newest first."""
    rows = conn.execute(f"{_SELECT} ORDER BY created_at DESC, launch_id").fetchall()
    return [_row_to_launch(r) for r in rows]
