"""DuckDB-backed payment rail and minter.

Both write through the store's connection, so when called inside a
DuckDBLaunchStore transaction their rows commit or roll back together with
the bet or claim that caused them.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import structlog

from predlaunch.engine.ports import vault_for

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

log = structlog.get_logger(__name__)


class CustodyLedger:
    """Records stake escrowed into each launch vault."""

    def __init__(self, conn: DuckDBPyConnection) -> None:
        self.conn = conn

    def escrow(self, launch_id: str, account: str, amount: int) -> None:
        self.conn.execute(
            "INSERT INTO custody (launch_id, vault, account, amount, created_at) VALUES (?, ?, ?, ?, ?)",
            [launch_id, vault_for(launch_id), account, amount, int(time.time())],
        )

    def refund(self, launch_id: str, account: str, amount: int) -> None:
        # The escrow row was part of the rolled-back transaction; nothing left to undo.
        log.debug("custody_refund_noop", launch_id=launch_id, account=account, amount=amount)

    def vault_balance(self, launch_id: str) -> int:
        row = self.conn.execute(
            "SELECT COALESCE(SUM(amount), 0) FROM custody WHERE launch_id = ?", [launch_id]
        ).fetchone()
        return int(row[0])


class MintLedger:
    """Records token issuance requested by claims."""

    def __init__(self, conn: DuckDBPyConnection) -> None:
        self.conn = conn

    def mint(self, launch_id: str, recipient: str, tokens: int, bet_id: str) -> None:
        self.conn.execute(
            "INSERT INTO mints (launch_id, bet_id, recipient, tokens, created_at) VALUES (?, ?, ?, ?, ?)",
            [launch_id, bet_id, recipient, tokens, int(time.time())],
        )

    def minted(self, launch_id: str, recipient: str | None = None) -> int:
        if recipient is None:
            row = self.conn.execute(
                "SELECT COALESCE(SUM(tokens), 0) FROM mints WHERE launch_id = ?", [launch_id]
            ).fetchone()
        else:
            row = self.conn.execute(
                "SELECT COALESCE(SUM(tokens), 0) FROM mints WHERE launch_id = ? AND recipient = ?",
                [launch_id, recipient],
            ).fetchone()
        return int(row[0])
