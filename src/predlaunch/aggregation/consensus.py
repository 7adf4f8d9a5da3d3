"""Median valuation from votes and stake-balanced settlement from bets.

These run outside the phase controller: the controller only accepts the
values they produce. Both scan the full record set, which is why they are
kept out of the bounded-cost transitions.
"""

from __future__ import annotations

from collections.abc import Iterable

from predlaunch.errors import ValidationError
from predlaunch.models.ledger import Bet, Vote


def median_mcap(votes: Iterable[Vote]) -> int:
    """Integer median of vote values. Even counts take the lower middle value."""
    values = sorted(v.mcap_vote for v in votes)
    if not values:
        raise ValidationError("no votes to aggregate")
    return values[(len(values) - 1) // 2]


def stake_by_breakpoint(bets: Iterable[Bet]) -> list[tuple[int, int]]:
    """[(breakpoint, total stake)] sorted by breakpoint."""
    totals: dict[int, int] = {}
    for bet in bets:
        totals[bet.breakpoint] = totals.get(bet.breakpoint, 0) + bet.amount
    return sorted(totals.items())


def balance_settlement(bets: Iterable[Bet]) -> int:
    """
    Stake-weighted median breakpoint: the lowest breakpoint at which the
    cumulative stake reaches half of all stake. Stake on either side of the
    result is as balanced as the discrete breakpoints allow.
    """
    levels = stake_by_breakpoint(bets)
    total = sum(stake for _, stake in levels)
    if total == 0:
        raise ValidationError("no stake to balance")
    cumulative = 0
    for breakpoint, stake in levels:
        cumulative += stake
        if cumulative * 2 >= total:
            return breakpoint
    return levels[-1][0]
