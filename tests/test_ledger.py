"""Vote and bet ledger transitions."""

import pytest

from conftest import DISCOVERY_END, PREDICT_END, SOL, T0
from predlaunch.engine.bets import place_bet
from predlaunch.engine.votes import submit_vote
from predlaunch.errors import ArithmeticOverflow, PhaseEnded, ValidationError, WrongPhase
from predlaunch.kernel.arithmetic import U64_MAX
from predlaunch.models import PredictState


def test_vote_increments_total(discovery_launch):
    launch, vote = submit_vote(discovery_launch, "alice", 1_000, now=T0)
    assert launch.total_votes == 1
    assert vote.voter == "alice"
    assert vote.timestamp == T0
    launch, _ = submit_vote(launch, "bob", 2_000, now=DISCOVERY_END - 1)
    assert launch.total_votes == 2


def test_vote_window_and_input(discovery_launch, predict_launch):
    with pytest.raises(PhaseEnded):
        submit_vote(discovery_launch, "alice", 1_000, now=DISCOVERY_END)
    with pytest.raises(ValidationError):
        submit_vote(discovery_launch, "alice", 0, now=T0)
    with pytest.raises(WrongPhase):
        submit_vote(predict_launch, "alice", 1_000, now=T0)


def test_vote_counter_overflow(discovery_launch):
    full = discovery_launch.with_state(discovery_launch.state.model_copy(update={"total_votes": 2**32 - 1}))
    with pytest.raises(ArithmeticOverflow):
        submit_vote(full, "alice", 1_000, now=T0)


def test_bet_records_multiplier_and_locks(predict_launch):
    launch, bet = place_bet(predict_launch, "alice", 5_000, True, 150 * SOL, now=DISCOVERY_END, bet_id="b1")
    assert bet.multiplier == 150
    assert bet.claimed is False
    assert launch.total_locked == 150 * SOL
    # multiplier reflects stake locked before the bet
    launch, bet2 = place_bet(launch, "bob", 4_000, False, SOL, now=DISCOVERY_END, bet_id="b2")
    assert bet2.multiplier == 130
    assert launch.total_locked == 151 * SOL


def test_bet_multiplier_never_increases(predict_launch):
    launch = predict_launch
    multipliers = []
    for i in range(15):
        launch, bet = place_bet(launch, f"u{i}", 5_000, i % 2 == 0, 50 * SOL, now=DISCOVERY_END, bet_id=f"b{i}")
        multipliers.append(bet.multiplier)
    assert multipliers == sorted(multipliers, reverse=True)
    assert multipliers[0] == 150
    assert multipliers[-1] == 50


def test_bet_window_and_input(discovery_launch, predict_launch):
    with pytest.raises(WrongPhase):
        place_bet(discovery_launch, "alice", 5_000, True, SOL, now=DISCOVERY_END, bet_id="b")
    with pytest.raises(PhaseEnded):
        place_bet(predict_launch, "alice", 5_000, True, SOL, now=PREDICT_END, bet_id="b")
    with pytest.raises(ValidationError):
        place_bet(predict_launch, "alice", 5_000, True, 0, now=DISCOVERY_END, bet_id="b")
    with pytest.raises(ValidationError):
        place_bet(predict_launch, "alice", 0, True, SOL, now=DISCOVERY_END, bet_id="b")


def test_bet_total_locked_overflow(predict_launch):
    full = predict_launch.with_state(
        PredictState(total_votes=0, median_mcap=5_000, total_locked=U64_MAX - 10)
    )
    with pytest.raises(ArithmeticOverflow):
        place_bet(full, "alice", 5_000, True, 11, now=DISCOVERY_END, bet_id="b")
