"""Claim processor - score a settled bet and size its token reward.

By default each claim is capped against the whole participant pool. That cap
is per claim, so the sum over all bets may exceed or fall short of the pool.
With ``normalized=True`` the cap is the pool minus what earlier claims
already took, which bounds the aggregate.
"""

from __future__ import annotations

from predlaunch.engine.phase import require_phase
from predlaunch.errors import AlreadyClaimed, NotAuthorized, ValidationError
from predlaunch.kernel.arithmetic import (
    U128_MAX,
    accuracy_score,
    checked_add,
    participant_pool,
    reward_weight,
)
from predlaunch.models.launch import Launch, Phase
from predlaunch.models.ledger import Bet, ClaimResult


def claim(
    launch: Launch,
    bet: Bet,
    claimer: str,
    normalized: bool = False,
) -> tuple[Launch, Bet, ClaimResult]:
    require_phase(launch, Phase.SETTLED)
    if bet.launch_id != launch.launch_id:
        raise ValidationError(f"bet {bet.bet_id} does not belong to launch {launch.launch_id}")
    if bet.claimed:
        raise AlreadyClaimed(f"bet {bet.bet_id} already claimed")
    if bet.bettor != claimer:
        raise NotAuthorized("Not the original bettor")

    accuracy = accuracy_score(bet.breakpoint, launch.settlement_value, bet.is_yes)
    weight = reward_weight(bet.amount, accuracy, bet.multiplier)
    pool = participant_pool(launch.total_supply)
    cap = pool - launch.total_distributed if normalized else pool
    tokens = min(weight, max(cap, 0))

    distributed = checked_add("total_distributed", launch.total_distributed, tokens, U128_MAX)
    updated = launch.with_state(launch.state.model_copy(update={"total_distributed": distributed}))
    result = ClaimResult(
        launch_id=launch.launch_id,
        bet_id=bet.bet_id,
        claimer=claimer,
        tokens=tokens,
        accuracy=accuracy,
        weight=weight,
        participant_pool=pool,
    )
    return updated, bet.model_copy(update={"claimed": True}), result
