"""Claim processor - scoring, caps and claim guards."""

import pytest

from conftest import DISCOVERY_END, PREDICT_END
from predlaunch.engine import phase
from predlaunch.engine.bets import place_bet
from predlaunch.engine.claims import claim
from predlaunch.errors import AlreadyClaimed, NotAuthorized, ValidationError, WrongPhase
from predlaunch.models import Bet


def _bet(**kwargs):
    fields = {
        "bet_id": "b1",
        "launch_id": "ALPHA",
        "bettor": "alice",
        "breakpoint": 100,
        "is_yes": True,
        "amount": 1_000,
        "multiplier": 150,
        "timestamp": DISCOVERY_END,
    }
    fields.update(kwargs)
    return Bet(**fields)


def test_claim_exact_match(settle_at):
    launch = settle_at(100)
    updated, claimed, result = claim(launch, _bet(), "alice")
    assert result.accuracy == 10_000
    assert result.weight == 1_500
    assert result.tokens == 1_500
    assert result.participant_pool == 800_000
    assert claimed.claimed is True
    assert updated.total_distributed == 1_500


def test_claim_guards(predict_launch, settle_at):
    launch = settle_at(100)
    with pytest.raises(WrongPhase):
        claim(predict_launch, _bet(), "alice")
    with pytest.raises(AlreadyClaimed):
        claim(launch, _bet(claimed=True), "alice")
    with pytest.raises(NotAuthorized):
        claim(launch, _bet(), "mallory")
    with pytest.raises(ValidationError):
        claim(launch, _bet(launch_id="OTHER"), "alice")


def test_claim_capped_at_participant_pool(predict_launch, settle_at):
    small = predict_launch.model_copy(update={"total_supply": 1_000})
    launch = settle_at(100, launch=small)
    _, _, result = claim(launch, _bet(amount=10**9), "alice")
    assert result.weight == 1_500_000_000
    assert result.tokens == 800


def test_default_cap_is_per_claim(predict_launch, settle_at):
    launch = settle_at(100, launch=predict_launch.model_copy(update={"total_supply": 2_000}))
    launch, _, first = claim(launch, _bet(bet_id="b1"), "alice")
    launch, _, second = claim(launch, _bet(bet_id="b2"), "alice")
    assert (first.tokens, second.tokens) == (1_500, 1_500)
    assert launch.total_distributed == 3_000  # exceeds the 1_600 pool


def test_normalized_cap_uses_remaining_pool(predict_launch, settle_at):
    launch = settle_at(100, launch=predict_launch.model_copy(update={"total_supply": 2_000}))
    launch, _, first = claim(launch, _bet(bet_id="b1"), "alice", normalized=True)
    launch, _, second = claim(launch, _bet(bet_id="b2"), "alice", normalized=True)
    launch, _, third = claim(launch, _bet(bet_id="b3"), "alice", normalized=True)
    assert (first.tokens, second.tokens, third.tokens) == (1_500, 100, 0)
    assert launch.total_distributed == 1_600


def test_claim_uses_multiplier_fixed_at_placement(predict_launch):
    launch, bet = place_bet(predict_launch, "alice", 100, True, 1_000, now=DISCOVERY_END, bet_id="b1")
    settled = phase.settle(launch, 100, now=PREDICT_END)
    _, _, result = claim(settled, bet, "alice")
    assert result.tokens == 1_000 * 10_000 * bet.multiplier // 1_000_000
