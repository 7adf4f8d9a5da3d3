"""DuckDB launch store - one connection, serialized transactions."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import duckdb
import structlog

from predlaunch.engine.phase import check_monotonic
from predlaunch.errors import DuplicateRecord, NotFound
from predlaunch.models.launch import Launch
from predlaunch.models.ledger import Bet, Vote
from predlaunch.storage import launches as launch_rows
from predlaunch.storage import ledger as ledger_rows
from predlaunch.storage.memory import check_bet_update

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

log = structlog.get_logger(__name__)


class _DuckDBTransaction:
    """Writes go straight to the connection inside BEGIN ... COMMIT."""

    def __init__(self, conn: DuckDBPyConnection, launch: Launch) -> None:
        self.conn = conn
        self.launch = launch

    def put_launch(self, launch: Launch) -> None:
        check_monotonic(self.launch, launch)
        launch_rows.update_launch_state(self.conn, launch)
        self.launch = launch

    def insert_vote(self, vote: Vote) -> None:
        try:
            ledger_rows.insert_vote(self.conn, vote)
        except duckdb.ConstraintException as e:
            raise DuplicateRecord(f"{vote.voter} already voted on {vote.launch_id}") from e

    def get_bet(self, bet_id: str) -> Bet:
        bet = ledger_rows.get_bet(self.conn, bet_id)
        if bet is None:
            raise NotFound(f"bet {bet_id} not found")
        return bet

    def insert_bet(self, bet: Bet) -> None:
        try:
            ledger_rows.insert_bet(self.conn, bet)
        except duckdb.ConstraintException as e:
            raise DuplicateRecord(f"bet {bet.bet_id} already exists") from e

    def put_bet(self, bet: Bet) -> None:
        check_bet_update(self.get_bet(bet.bet_id), bet)
        if bet.claimed:
            ledger_rows.mark_bet_claimed(self.conn, bet.bet_id)


class DuckDBLaunchStore:
    """LaunchStore on a DuckDB connection. The connection is shared with
    CustodyLedger / MintLedger so their writes join the same transaction.
    Anything else writing on the connection must hold ``lock``."""

    def __init__(self, conn: DuckDBPyConnection) -> None:
        self.conn = conn
        self.lock = threading.RLock()

    def create(self, launch: Launch) -> None:
        with self.lock:
            try:
                launch_rows.insert_launch(self.conn, launch)
            except duckdb.ConstraintException as e:
                raise DuplicateRecord(f"launch {launch.launch_id} already exists") from e

    @contextmanager
    def transaction(self, launch_id: str) -> Iterator[_DuckDBTransaction]:
        with self.lock:
            self.conn.begin()
            try:
                launch = launch_rows.get_launch(self.conn, launch_id)
                if launch is None:
                    raise NotFound(f"launch {launch_id} not found")
                tx = _DuckDBTransaction(self.conn, launch)
                yield tx
            except BaseException:
                self.conn.rollback()
                raise
            self.conn.commit()
            log.debug("launch_tx_committed", launch_id=launch_id, phase=tx.launch.phase.value)

    def get_launch(self, launch_id: str) -> Launch:
        with self.lock:
            launch = launch_rows.get_launch(self.conn, launch_id)
        if launch is None:
            raise NotFound(f"launch {launch_id} not found")
        return launch

    def list_launches(self) -> list[Launch]:
        with self.lock:
            return launch_rows.list_launches(self.conn)

    def list_votes(self, launch_id: str) -> list[Vote]:
        with self.lock:
            return ledger_rows.list_votes(self.conn, launch_id)

    def list_bets(self, launch_id: str, bettor: str | None = None) -> list[Bet]:
        with self.lock:
            return ledger_rows.list_bets(self.conn, launch_id, bettor=bettor)
