"""LaunchService - transactional entry point for the six launch operations.

Each operation reads `now` from the clock, takes an exclusive store
transaction on the launch, runs the pure transition from the engine modules,
performs collaborator side effects (escrow, mint) before commit, and emits its
notification only after the commit succeeded. A failure anywhere leaves the
store untouched.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog

from predlaunch.engine import bets, claims, phase, votes
from predlaunch.engine.ports import (
    Clock,
    EventSink,
    LaunchStore,
    LogEventSink,
    Minter,
    PaymentRail,
    SystemClock,
)
from predlaunch.errors import LaunchError, NotAuthorized
from predlaunch.kernel.arithmetic import LAMPORTS_PER_UNIT
from predlaunch.models.events import (
    BetPlaced,
    EventBase,
    LaunchCreated,
    LaunchSettled,
    PredictStarted,
    TokensClaimed,
    VoteSubmitted,
)
from predlaunch.models.launch import Launch
from predlaunch.models.ledger import Bet, ClaimResult, Vote

log = structlog.get_logger(__name__)


def new_bet_id() -> str:
    return uuid.uuid4().hex[:16]


class LaunchService:
    """Public API of the launch market. Stateless apart from its collaborators."""

    def __init__(
        self,
        store: LaunchStore,
        *,
        payment_rail: PaymentRail,
        minter: Minter,
        clock: Clock | None = None,
        events: EventSink | None = None,
        base_units_per_unit: int = LAMPORTS_PER_UNIT,
        normalized_claims: bool = False,
    ) -> None:
        self.store = store
        self.payment_rail = payment_rail
        self.minter = minter
        self.clock = clock or SystemClock()
        self.events = events or LogEventSink()
        self.base_units_per_unit = base_units_per_unit
        self.normalized_claims = normalized_claims

    @contextmanager
    def _operation(self, op: str, **fields: Any) -> Iterator[None]:
        try:
            yield
        except LaunchError as e:
            log.info("launch_op_rejected", op=op, code=e.code, detail=e.detail, **fields)
            raise

    def _emit(self, event: EventBase) -> None:
        # runs after commit, the operation has already succeeded
        try:
            self.events.emit(event)
        except Exception:
            log.exception("notification_failed", launch_id=event.launch_id, event_type=event.event_type)

    @staticmethod
    def _require_authority(launch: Launch, caller: str) -> None:
        if caller != launch.authority:
            raise NotAuthorized(f"{caller} is not the authority of launch {launch.launch_id}")

    def create_launch(
        self,
        authority: str,
        name: str,
        symbol: str,
        total_supply: int,
        discovery_duration: int,
        predict_duration: int,
    ) -> Launch:
        now = self.clock.now()
        with self._operation("create", name=name):
            launch = phase.create(
                authority, name, symbol, total_supply, discovery_duration, predict_duration, now
            )
            self.store.create(launch)
        self._emit(
            LaunchCreated(
                launch_id=launch.launch_id,
                ts=now,
                name=launch.name,
                symbol=launch.symbol,
                discovery_end=launch.discovery_end,
                predict_end=launch.predict_end,
            )
        )
        return launch

    def submit_vote(self, launch_id: str, voter: str, mcap_vote: int) -> Vote:
        now = self.clock.now()
        with self._operation("submit_vote", launch_id=launch_id, voter=voter):
            with self.store.transaction(launch_id) as tx:
                updated, vote = votes.submit_vote(tx.launch, voter, mcap_vote, now)
                tx.insert_vote(vote)
                tx.put_launch(updated)
        self._emit(VoteSubmitted(launch_id=launch_id, ts=now, voter=voter, mcap_vote=mcap_vote))
        return vote

    def advance_to_predict(self, launch_id: str, caller: str, median_mcap: int) -> Launch:
        now = self.clock.now()
        with self._operation("advance_to_predict", launch_id=launch_id, caller=caller):
            with self.store.transaction(launch_id) as tx:
                self._require_authority(tx.launch, caller)
                updated = phase.advance_to_predict(tx.launch, median_mcap, now)
                tx.put_launch(updated)
        self._emit(PredictStarted(launch_id=launch_id, ts=now, median_mcap=median_mcap))
        return updated

    def place_bet(
        self,
        launch_id: str,
        bettor: str,
        breakpoint: int,
        is_yes: bool,
        amount: int,
    ) -> Bet:
        now = self.clock.now()
        escrowed = False
        with self._operation("place_bet", launch_id=launch_id, bettor=bettor):
            try:
                with self.store.transaction(launch_id) as tx:
                    updated, bet = bets.place_bet(
                        tx.launch,
                        bettor,
                        breakpoint,
                        is_yes,
                        amount,
                        now,
                        bet_id=new_bet_id(),
                        base_units_per_unit=self.base_units_per_unit,
                    )
                    self.payment_rail.escrow(launch_id, bettor, amount)
                    escrowed = True
                    tx.insert_bet(bet)
                    tx.put_launch(updated)
            except Exception:
                if escrowed:
                    log.warning("escrow_reverted", launch_id=launch_id, bettor=bettor, amount=amount)
                    self.payment_rail.refund(launch_id, bettor, amount)
                raise
        self._emit(
            BetPlaced(
                launch_id=launch_id,
                ts=now,
                bet_id=bet.bet_id,
                bettor=bettor,
                breakpoint=breakpoint,
                is_yes=is_yes,
                amount=amount,
                multiplier=bet.multiplier,
            )
        )
        return bet

    def settle(self, launch_id: str, caller: str, settlement_value: int) -> Launch:
        now = self.clock.now()
        with self._operation("settle", launch_id=launch_id, caller=caller):
            with self.store.transaction(launch_id) as tx:
                self._require_authority(tx.launch, caller)
                updated = phase.settle(tx.launch, settlement_value, now)
                tx.put_launch(updated)
        self._emit(
            LaunchSettled(
                launch_id=launch_id,
                ts=now,
                settlement_value=settlement_value,
                total_locked=updated.total_locked,
            )
        )
        return updated

    def claim(self, launch_id: str, bet_id: str, claimer: str) -> ClaimResult:
        now = self.clock.now()
        with self._operation("claim", launch_id=launch_id, bet_id=bet_id, claimer=claimer):
            with self.store.transaction(launch_id) as tx:
                bet = tx.get_bet(bet_id)
                updated, claimed_bet, result = claims.claim(
                    tx.launch, bet, claimer, normalized=self.normalized_claims
                )
                tx.put_bet(claimed_bet)
                tx.put_launch(updated)
                if result.tokens > 0:
                    self.minter.mint(launch_id, claimer, result.tokens, bet_id)
        self._emit(
            TokensClaimed(
                launch_id=launch_id,
                ts=now,
                bet_id=bet_id,
                claimer=claimer,
                tokens=result.tokens,
                accuracy=result.accuracy,
            )
        )
        return result

    def get_launch(self, launch_id: str) -> Launch:
        return self.store.get_launch(launch_id)

    def list_votes(self, launch_id: str) -> list[Vote]:
        return self.store.list_votes(launch_id)

    def list_bets(self, launch_id: str, bettor: str | None = None) -> list[Bet]:
        return self.store.list_bets(launch_id, bettor=bettor)
