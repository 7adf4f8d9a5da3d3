"""Pure integer arithmetic for multipliers, accuracy and reward weights."""

from predlaunch.kernel.arithmetic import (
    BPS,
    LAMPORTS_PER_UNIT,
    accuracy_score,
    locked_units,
    multiplier_for_locked,
    participant_pool,
    reward_weight,
    stake_multiplier,
)

__all__ = [
    "BPS",
    "LAMPORTS_PER_UNIT",
    "accuracy_score",
    "locked_units",
    "multiplier_for_locked",
    "participant_pool",
    "reward_weight",
    "stake_multiplier",
]
