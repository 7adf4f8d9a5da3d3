"""Phase controller transitions and the monotonic write guard."""

import pytest

from conftest import DISCOVERY_END, PREDICT_END, T0
from predlaunch.engine import phase
from predlaunch.errors import ArithmeticOverflow, PhaseNotEnded, ValidationError, WrongPhase
from predlaunch.models import DiscoveryState, Phase, PredictState


def test_create_sets_deadlines_and_discovery(discovery_launch):
    assert discovery_launch.phase is Phase.DISCOVERY
    assert discovery_launch.discovery_end == DISCOVERY_END
    assert discovery_launch.predict_end == PREDICT_END
    assert discovery_launch.discovery_end < discovery_launch.predict_end
    assert discovery_launch.total_votes == 0
    assert discovery_launch.median_mcap is None
    assert discovery_launch.settlement_value is None
    assert isinstance(discovery_launch.state, DiscoveryState)
    assert not hasattr(discovery_launch.state, "median_mcap")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"name": "N" * 33},
        {"name": ""},
        {"symbol": "S" * 11},
        {"discovery_duration": 0},
        {"discovery_duration": 3601},
        {"predict_duration": 0},
        {"predict_duration": 86401},
        {"total_supply": -1},
    ],
)
def test_create_rejects_bad_input(kwargs):
    args = {
        "authority": "authority",
        "name": "ALPHA",
        "symbol": "ALP",
        "total_supply": 1_000,
        "discovery_duration": 60,
        "predict_duration": 60,
        "now": T0,
    }
    args.update(kwargs)
    with pytest.raises(ValidationError):
        phase.create(**args)


def test_create_accepts_limits():
    launch = phase.create("a", "N" * 32, "S" * 10, 0, 3600, 86400, now=T0)
    assert launch.predict_end == T0 + 3600 + 86400


def test_create_supply_beyond_u64_overflows():
    with pytest.raises(ArithmeticOverflow):
        phase.create("a", "ALPHA", "ALP", 2**64, 60, 60, now=T0)


def test_advance_to_predict(discovery_launch):
    with pytest.raises(PhaseNotEnded):
        phase.advance_to_predict(discovery_launch, 5_000, now=DISCOVERY_END - 1)
    launch = phase.advance_to_predict(discovery_launch, 5_000, now=DISCOVERY_END)
    assert launch.phase is Phase.PREDICT
    assert launch.median_mcap == 5_000
    assert launch.total_locked == 0
    assert isinstance(launch.state, PredictState)
    assert not hasattr(launch.state, "settlement_value")
    with pytest.raises(WrongPhase):
        phase.advance_to_predict(launch, 5_000, now=DISCOVERY_END)


def test_advance_checks_timing_before_median(discovery_launch):
    with pytest.raises(PhaseNotEnded):
        phase.advance_to_predict(discovery_launch, 0, now=T0)
    with pytest.raises(ValidationError):
        phase.advance_to_predict(discovery_launch, 0, now=DISCOVERY_END)


def test_settle(discovery_launch, predict_launch):
    with pytest.raises(WrongPhase):
        phase.settle(discovery_launch, 100, now=PREDICT_END)
    with pytest.raises(PhaseNotEnded):
        phase.settle(predict_launch, 100, now=PREDICT_END - 1)
    with pytest.raises(ValidationError):
        phase.settle(predict_launch, 0, now=PREDICT_END)
    settled = phase.settle(predict_launch, 100, now=PREDICT_END)
    assert settled.phase is Phase.SETTLED
    assert settled.settlement_value == 100
    assert settled.median_mcap == predict_launch.median_mcap
    assert settled.total_distributed == 0
    with pytest.raises(WrongPhase):
        phase.settle(settled, 100, now=PREDICT_END)


def test_records_are_immutable(discovery_launch):
    phase.advance_to_predict(discovery_launch, 5_000, now=DISCOVERY_END)
    assert discovery_launch.phase is Phase.DISCOVERY


def test_check_monotonic_rejects_regressions(discovery_launch, predict_launch, settle_at):
    settled = settle_at(200)
    phase.check_monotonic(discovery_launch, predict_launch)
    phase.check_monotonic(predict_launch, settled)
    with pytest.raises(ValueError):
        phase.check_monotonic(predict_launch, discovery_launch)
    with pytest.raises(ValueError):
        phase.check_monotonic(settled, settle_at(300))
    fewer_votes = discovery_launch.with_state(DiscoveryState(total_votes=0))
    more_votes = discovery_launch.with_state(DiscoveryState(total_votes=3))
    with pytest.raises(ValueError):
        phase.check_monotonic(more_votes, fewer_votes)


def test_name_and_symbol_limits_count_utf8_bytes():
    assert phase.create("authority", "é" * 16, "ü" * 5, 1_000, 60, 60, now=T0).name == "é" * 16
    with pytest.raises(ValidationError):
        phase.create("authority", "é" * 17, "ALP", 1_000, 60, 60, now=T0)
    with pytest.raises(ValidationError):
        phase.create("authority", "ALPHA", "ü" * 6, 1_000, 60, 60, now=T0)
