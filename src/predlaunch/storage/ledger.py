"""Vote and bet persistence."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from predlaunch.models.ledger import Bet, Vote

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

_BET_COLUMNS = ["bet_id", "launch_id", "bettor", "breakpoint", "is_yes", "amount", "multiplier", "timestamp", "claimed"]
_BET_SELECT = f"SELECT {', '.join(_BET_COLUMNS)} FROM bets"


def _row_to_bet(row: tuple[Any, ...]) -> Bet:
    return Bet(**dict(zip(_BET_COLUMNS, row)))


def insert_vote(conn: DuckDBPyConnection, vote: Vote) -> None:
    """Raises duckdb.ConstraintException if this voter already voted on the launch."""
    conn.execute(
        "INSERT INTO votes (launch_id, voter, mcap_vote, timestamp) VALUES (?, ?, ?, ?)",
        [vote.launch_id, vote.voter, vote.mcap_vote, vote.timestamp],
    )


def list_votes(conn: DuckDBPyConnection, launch_id: str) -> list[Vote]:
    rows = conn.execute(
        "SELECT launch_id, voter, mcap_vote, timestamp FROM votes WHERE launch_id = ? ORDER BY timestamp, voter",
        [launch_id],
    ).fetchall()
    return [Vote(launch_id=r[0], voter=r[1], mcap_vote=r[2], timestamp=r[3]) for r in rows]


def insert_bet(conn: DuckDBPyConnection, bet: Bet) -> None:
    conn.execute(
        f"INSERT INTO bets ({', '.join(_BET_COLUMNS)}) VALUES ({', '.join('?' * len(_BET_COLUMNS))})",
        [getattr(bet, c) for c in _BET_COLUMNS],
    )


def get_bet(conn: DuckDBPyConnection, bet_id: str) -> Bet | None:
    row = conn.execute(f"{_BET_SELECT} WHERE bet_id = ?", [bet_id]).fetchone()
    return _row_to_bet(row) if row else None


def mark_bet_claimed(conn: DuckDBPyConnection, bet_id: str) -> None:
    conn.execute("UPDATE bets SET claimed = TRUE WHERE bet_id = ?", [bet_id])


def list_bets(conn: DuckDBPyConnection, launch_id: str, bettor: str | None = None) -> list[Bet]:
    """Bets of a launch in placement order, optionally for one bettor."""
    if bettor is None:
        rows = conn.execute(
            f"{_BET_SELECT} WHERE launch_id = ? ORDER BY timestamp, bet_id", [launch_id]
        ).fetchall()
    else:
        rows = conn.execute(
            f"{_BET_SELECT} WHERE launch_id = ? AND bettor = ? ORDER BY timestamp, bet_id",
            [launch_id, bettor],
        ).fetchall()
    return [_row_to_bet(r) for r in rows]
