"""Bet ledger - predict-phase stakes with entry-time multiplier."""

from __future__ import annotations

from predlaunch.engine.phase import require_phase
from predlaunch.errors import PhaseEnded, ValidationError
from predlaunch.kernel.arithmetic import (
    LAMPORTS_PER_UNIT,
    U64_MAX,
    check_width,
    checked_add,
    multiplier_for_locked,
)
from predlaunch.models.launch import Launch, Phase
from predlaunch.models.ledger import Bet


def place_bet(
    launch: Launch,
    bettor: str,
    breakpoint: int,
    is_yes: bool,
    amount: int,
    now: int,
    bet_id: str,
    base_units_per_unit: int = LAMPORTS_PER_UNIT,
) -> tuple[Launch, Bet]:
    """
    Return (launch with total_locked + amount, new Bet).

    The multiplier depends on the launch-wide total locked before this bet, so
    earlier stakes never get a lower multiplier than later ones.
    """
    require_phase(launch, Phase.PREDICT)
    if now >= launch.predict_end:
        raise PhaseEnded(f"predict ended at {launch.predict_end}")
    if amount <= 0:
        raise ValidationError("Invalid bet amount")
    if breakpoint <= 0:
        raise ValidationError("Invalid breakpoint")
    check_width("amount", amount, U64_MAX)
    check_width("breakpoint", breakpoint, U64_MAX)

    multiplier = multiplier_for_locked(launch.total_locked, base_units_per_unit)
    total_locked = checked_add("total_locked", launch.total_locked, amount)
    bet = Bet(
        bet_id=bet_id,
        launch_id=launch.launch_id,
        bettor=bettor,
        breakpoint=breakpoint,
        is_yes=is_yes,
        amount=amount,
        multiplier=multiplier,
        timestamp=now,
    )
    updated = launch.with_state(launch.state.model_copy(update={"total_locked": total_locked}))
    return updated, bet
