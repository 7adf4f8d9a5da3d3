"""Median and settlement balancing over ledger records."""

import pytest

from predlaunch.aggregation.consensus import balance_settlement, median_mcap, stake_by_breakpoint
from predlaunch.errors import ValidationError
from predlaunch.models import Bet, Vote


def _votes(*values):
    return [Vote(launch_id="L", voter=f"v{i}", mcap_vote=v, timestamp=i) for i, v in enumerate(values)]


def _bets(*pairs):
    return [
        Bet(bet_id=f"b{i}", launch_id="L", bettor=f"u{i}", breakpoint=bp, is_yes=True, amount=amt, multiplier=150, timestamp=i)
        for i, (bp, amt) in enumerate(pairs)
    ]


def test_median_odd_and_even():
    assert median_mcap(_votes(300, 100, 200)) == 200
    assert median_mcap(_votes(400, 100, 300, 200)) == 200
    assert median_mcap(_votes(7)) == 7


def test_median_requires_votes():
    with pytest.raises(ValidationError):
        median_mcap([])


def test_stake_by_breakpoint_groups():
    assert stake_by_breakpoint(_bets((200, 5), (100, 3), (200, 2))) == [(100, 3), (200, 7)]


def test_balance_settlement_weighted_median():
    assert balance_settlement(_bets((100, 10), (200, 30), (300, 10))) == 200
    assert balance_settlement(_bets((100, 60), (200, 40))) == 100
    assert balance_settlement(_bets((100, 50), (200, 50))) == 100


def test_balance_settlement_requires_bets():
    with pytest.raises(ValidationError):
        balance_settlement([])
