"""In-process launch store with per-launch locks and staged writes."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from predlaunch.engine.phase import check_monotonic
from predlaunch.errors import DuplicateRecord, NotFound
from predlaunch.models.launch import Launch
from predlaunch.models.ledger import Bet, Vote


def check_bet_update(old: Bet, new: Bet) -> None:
    """Only the claimed flag may change, and only from False to True."""
    if new.model_dump(exclude={"claimed"}) != old.model_dump(exclude={"claimed"}):
        raise ValueError(f"bet {old.bet_id} is immutable apart from its claimed flag")
    if old.claimed and not new.claimed:
        raise ValueError(f"bet {old.bet_id} cannot be unclaimed")


class _MemoryTransaction:
    """Buffers writes; MemoryLaunchStore applies them only if the block exits cleanly."""

    def __init__(self, store: MemoryLaunchStore, launch: Launch) -> None:
        self._store = store
        self.launch = launch
        self._launch_dirty = False
        self._votes: dict[tuple[str, str], Vote] = {}
        self._bets: dict[str, Bet] = {}

    def put_launch(self, launch: Launch) -> None:
        check_monotonic(self.launch, launch)
        self.launch = launch
        self._launch_dirty = True

    def insert_vote(self, vote: Vote) -> None:
        key = (vote.launch_id, vote.voter)
        if key in self._votes or key in self._store._votes:
            raise DuplicateRecord(f"{vote.voter} already voted on {vote.launch_id}")
        self._votes[key] = vote

    def get_bet(self, bet_id: str) -> Bet:
        bet = self._bets.get(bet_id) or self._store._bets.get(bet_id)
        if bet is None:
            raise NotFound(f"bet {bet_id} not found")
        return bet

    def insert_bet(self, bet: Bet) -> None:
        if bet.bet_id in self._bets or bet.bet_id in self._store._bets:
            raise DuplicateRecord(f"bet {bet.bet_id} already exists")
        self._bets[bet.bet_id] = bet

    def put_bet(self, bet: Bet) -> None:
        check_bet_update(self.get_bet(bet.bet_id), bet)
        self._bets[bet.bet_id] = bet

    def _apply(self) -> None:
        if self._launch_dirty:
            self._store._launches[self.launch.launch_id] = self.launch
        self._store._votes.update(self._votes)
        self._store._bets.update(self._bets)


class MemoryLaunchStore:
    """LaunchStore kept in dicts. Safe for concurrent callers within one process."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._launch_locks: dict[str, threading.Lock] = {}
        self._launches: dict[str, Launch] = {}
        self._votes: dict[tuple[str, str], Vote] = {}
        self._bets: dict[str, Bet] = {}

    def create(self, launch: Launch) -> None:
        with self._lock:
            if launch.launch_id in self._launches:
                raise DuplicateRecord(f"launch {launch.launch_id} already exists")
            self._launches[launch.launch_id] = launch
            self._launch_locks[launch.launch_id] = threading.Lock()

    @contextmanager
    def transaction(self, launch_id: str) -> Iterator[_MemoryTransaction]:
        with self._lock:
            launch_lock = self._launch_locks.get(launch_id)
        if launch_lock is None:
            raise NotFound(f"launch {launch_id} not found")
        with launch_lock:
            tx = _MemoryTransaction(self, self._launches[launch_id])
            yield tx
            with self._lock:
                tx._apply()

    def get_launch(self, launch_id: str) -> Launch:
        launch = self._launches.get(launch_id)
        if launch is None:
            raise NotFound(f"launch {launch_id} not found")
        return launch

    def list_launches(self) -> list[Launch]:
        return sorted(self._launches.values(), key=lambda launch: (-launch.created_at, launch.launch_id))

    def list_votes(self, launch_id: str) -> list[Vote]:
        return sorted(
            (v for v in self._votes.values() if v.launch_id == launch_id),
            key=lambda v: (v.timestamp, v.voter),
        )

    def list_bets(self, launch_id: str, bettor: str | None = None) -> list[Bet]:
        return sorted(
            (
                b
                for b in self._bets.values()
                if b.launch_id == launch_id and (bettor is None or b.bettor == bettor)
            ),
            key=lambda b: (b.timestamp, b.bet_id),
        )
