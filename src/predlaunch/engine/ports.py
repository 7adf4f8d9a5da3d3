"""Collaborator protocols (clock, payment rail, minter, event sink, store) and in-process implementations."""

from __future__ import annotations

import time
from contextlib import AbstractContextManager
from typing import Protocol

import structlog

from predlaunch.models.events import EventBase
from predlaunch.models.launch import Launch
from predlaunch.models.ledger import Bet, Vote

log = structlog.get_logger(__name__)


def vault_for(launch_id: str) -> str:
    """Custody account holding all stakes of one launch."""
    return f"vault:{launch_id}"


class Clock(Protocol):
    def now(self) -> int: ...


class PaymentRail(Protocol):
    """Moves stake from a bettor into the launch vault."""

    def escrow(self, launch_id: str, account: str, amount: int) -> None: ...
    def refund(self, launch_id: str, account: str, amount: int) -> None: ...


class Minter(Protocol):
    def mint(self, launch_id: str, recipient: str, tokens: int, bet_id: str) -> None: ...


class EventSink(Protocol):
    def emit(self, event: EventBase) -> None: ...


class LaunchTransaction(Protocol):
    """Exclusive view of one launch for the duration of a store transaction."""

    launch: Launch

    def put_launch(self, launch: Launch) -> None: ...
    def insert_vote(self, vote: Vote) -> None: ...
    def get_bet(self, bet_id: str) -> Bet: ...
    def insert_bet(self, bet: Bet) -> None: ...
    def put_bet(self, bet: Bet) -> None: ...


class LaunchStore(Protocol):
    """Keyed durable store. Unique keys: launch_id, (launch_id, voter), bet_id."""

    def create(self, launch: Launch) -> None: ...
    def transaction(self, launch_id: str) -> AbstractContextManager[LaunchTransaction]: ...
    def get_launch(self, launch_id: str) -> Launch: ...
    def list_launches(self) -> list[Launch]: ...
    def list_votes(self, launch_id: str) -> list[Vote]: ...
    def list_bets(self, launch_id: str, bettor: str | None = None) -> list[Bet]: ...


class SystemClock:
    def now(self) -> int:
        return int(time.time())


class FixedClock:
    """Manually driven clock for tests and dry runs."""

    def __init__(self, now: int = 0) -> None:
        self._now = now

    def now(self) -> int:
        return self._now

    def set(self, now: int) -> None:
        self._now = now


class MemoryPaymentRail:
    """Tracks vault balances per launch and paid-in totals per account."""

    def __init__(self) -> None:
        self.vaults: dict[str, int] = {}
        self.paid: dict[tuple[str, str], int] = {}

    def escrow(self, launch_id: str, account: str, amount: int) -> None:
        vault = vault_for(launch_id)
        self.vaults[vault] = self.vaults.get(vault, 0) + amount
        self.paid[(launch_id, account)] = self.paid.get((launch_id, account), 0) + amount

    def refund(self, launch_id: str, account: str, amount: int) -> None:
        vault = vault_for(launch_id)
        self.vaults[vault] = self.vaults.get(vault, 0) - amount
        self.paid[(launch_id, account)] = self.paid.get((launch_id, account), 0) - amount


class MemoryMinter:
    def __init__(self) -> None:
        self.balances: dict[str, int] = {}
        self.mints: list[tuple[str, str, int, str]] = []

    def mint(self, launch_id: str, recipient: str, tokens: int, bet_id: str) -> None:
        self.balances[recipient] = self.balances.get(recipient, 0) + tokens
        self.mints.append((launch_id, recipient, tokens, bet_id))


class MemoryEventSink:
    def __init__(self) -> None:
        self.events: list[EventBase] = []

    def emit(self, event: EventBase) -> None:
        self.events.append(event)

    def of_type(self, event_type: str) -> list[EventBase]:
        return [e for e in self.events if e.event_type == event_type]


class LogEventSink:
    """Writes each notification as a structlog event."""

    def emit(self, event: EventBase) -> None:
        payload = event.model_dump()
        log.info(payload.pop("event_type"), **payload)


class FanoutEventSink:
    def __init__(self, *sinks: EventSink) -> None:
        self.sinks = sinks

    def emit(self, event: EventBase) -> None:
        for sink in self.sinks:
            sink.emit(event)
