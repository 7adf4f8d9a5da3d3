"""Fixed-point launch arithmetic - stake multiplier, accuracy score, reward weight.

All functions are pure and integer-only. Python integers never wrap, so every
width the ledger relies on (u16 basis points, u64 amounts, u128 intermediates)
is checked explicitly and a violation raises ArithmeticOverflow instead of
producing a silently widened result.
"""

from __future__ import annotations

from predlaunch.errors import ArithmeticOverflow, ValidationError

U16_MAX = 2**16 - 1
U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1
U128_MAX = 2**128 - 1
I64_MAX = 2**63 - 1

BPS = 10_000
LAMPORTS_PER_UNIT = 1_000_000_000
WRONG_DIRECTION_RETENTION_PCT = 67
PARTICIPANT_SHARE_PCT = 80

# (lower bound in whole units, multiplier bp), first match from the top wins.
# Below the last bound a stake gets EARLY_MULTIPLIER.
MULTIPLIER_SCHEDULE: tuple[tuple[int, int], ...] = (
    (600, 50),
    (500, 60),
    (400, 80),
    (300, 100),
    (200, 110),
    (100, 130),
)
EARLY_MULTIPLIER = 150


def check_width(name: str, value: int, limit: int) -> int:
    """Reject negatives as malformed input and anything above limit as overflow."""
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    if value > limit:
        raise ArithmeticOverflow(f"{name}={value} exceeds {limit.bit_length()}-bit range")
    return value


def checked_add(name: str, a: int, b: int, limit: int = U64_MAX) -> int:
    return check_width(name, a + b, limit)


def _checked_mul(name: str, a: int, b: int, limit: int = U128_MAX) -> int:
    return check_width(name, a * b, limit)


def locked_units(total_locked: int, base_units_per_unit: int = LAMPORTS_PER_UNIT) -> int:
    """Whole currency units in total_locked (floor)."""
    check_width("total_locked", total_locked, U64_MAX)
    if base_units_per_unit <= 0:
        raise ValidationError("base_units_per_unit must be positive")
    return total_locked // base_units_per_unit


def stake_multiplier(units: int) -> int:
    """Multiplier in basis points (150 = 1.5x) for the given whole units already locked."""
    check_width("locked_units", units, U64_MAX)
    for lower, multiplier in MULTIPLIER_SCHEDULE:
        if units >= lower:
            return multiplier
    return EARLY_MULTIPLIER


def multiplier_for_locked(total_locked: int, base_units_per_unit: int = LAMPORTS_PER_UNIT) -> int:
    """Multiplier for a new stake, given the smallest-unit total locked before it."""
    return stake_multiplier(locked_units(total_locked, base_units_per_unit))


def accuracy_score(breakpoint: int, settlement: int, is_yes: bool) -> int:
    """
    Accuracy in basis points: discretized 1 / (1 + (distance/settlement)^2).

    A yes bet is correct when settlement >= breakpoint, a no bet when
    settlement < breakpoint. A wrong direction keeps 67% of the raw score.
    Large distances floor to 0.
    """
    check_width("breakpoint", breakpoint, U64_MAX)
    check_width("settlement", settlement, U64_MAX)
    if settlement == 0:
        raise ValidationError("settlement must be positive")

    distance = abs(breakpoint - settlement)
    ratio = _checked_mul("distance*10000", distance, BPS) // settlement
    ratio_sq = _checked_mul("ratio^2", ratio, ratio) // BPS
    raw = (BPS * BPS) // checked_add("10000+ratio^2", BPS, ratio_sq, U128_MAX)

    correct = settlement >= breakpoint if is_yes else settlement < breakpoint
    if correct:
        return raw
    return raw * WRONG_DIRECTION_RETENTION_PCT // 100


def reward_weight(amount: int, accuracy_bp: int, multiplier_bp: int) -> int:
    """Token weight = amount * accuracy * multiplier, scaled down by bp (10000) then percent (100)."""
    check_width("amount", amount, U64_MAX)
    check_width("accuracy_bp", accuracy_bp, U16_MAX)
    check_width("multiplier_bp", multiplier_bp, U16_MAX)
    product = _checked_mul("amount*accuracy", amount, accuracy_bp)
    product = _checked_mul("amount*accuracy*multiplier", product, multiplier_bp)
    return product // BPS // 100


def participant_pool(total_supply: int) -> int:
    """Share of total supply reserved for bettors (80%)."""
    check_width("total_supply", total_supply, U64_MAX)
    return total_supply * PARTICIPANT_SHARE_PCT // 100
