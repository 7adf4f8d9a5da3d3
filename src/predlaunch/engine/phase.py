"""Phase controller - legal transitions Discovery -> Predict -> Settled.

Transitions are pure: they validate against `now` and return a new Launch.
The caller (LaunchService) owns locking and persistence. Median and
settlement values arrive from an external aggregator and are only gated
here, never recomputed.
"""

from __future__ import annotations

from predlaunch.errors import ArithmeticOverflow, PhaseNotEnded, ValidationError, WrongPhase
from predlaunch.kernel.arithmetic import I64_MAX, U64_MAX, check_width
from predlaunch.models.launch import DiscoveryState, Launch, Phase, PredictState, SettledState

# UTF-8 byte limits, the name doubles as the launch key
MAX_NAME_LEN = 32
MAX_SYMBOL_LEN = 10
MAX_DISCOVERY_DURATION = 3600
MAX_PREDICT_DURATION = 86400


def require_phase(launch: Launch, phase: Phase) -> None:
    if launch.phase is not phase:
        raise WrongPhase(f"launch {launch.launch_id} is in {launch.phase.value}, expected {phase.value}")


def create(
    authority: str,
    name: str,
    symbol: str,
    total_supply: int,
    discovery_duration: int,
    predict_duration: int,
    now: int,
) -> Launch:
    """New launch in Discovery. Deadlines are fixed here and never change."""
    if not name:
        raise ValidationError("name must not be empty")
    if len(name.encode()) > MAX_NAME_LEN:
        raise ValidationError(f"Name too long (max {MAX_NAME_LEN} bytes)")
    if len(symbol.encode()) > MAX_SYMBOL_LEN:
        raise ValidationError(f"Symbol too long (max {MAX_SYMBOL_LEN} bytes)")
    check_width("total_supply", total_supply, U64_MAX)
    if not 0 < discovery_duration <= MAX_DISCOVERY_DURATION:
        raise ValidationError(f"discovery_duration must be in (0, {MAX_DISCOVERY_DURATION}]")
    if not 0 < predict_duration <= MAX_PREDICT_DURATION:
        raise ValidationError(f"predict_duration must be in (0, {MAX_PREDICT_DURATION}]")

    discovery_end = now + discovery_duration
    predict_end = discovery_end + predict_duration
    if predict_end > I64_MAX:
        raise ArithmeticOverflow("phase deadline exceeds i64 timestamp range")

    return Launch(
        launch_id=name,
        authority=authority,
        name=name,
        symbol=symbol,
        total_supply=total_supply,
        discovery_end=discovery_end,
        predict_end=predict_end,
        created_at=now,
        state=DiscoveryState(),
    )


def advance_to_predict(launch: Launch, median_mcap: int, now: int) -> Launch:
    require_phase(launch, Phase.DISCOVERY)
    if now < launch.discovery_end:
        raise PhaseNotEnded(f"discovery ends at {launch.discovery_end}, now {now}")
    if median_mcap <= 0:
        raise ValidationError("Invalid median value")
    check_width("median_mcap", median_mcap, U64_MAX)
    return launch.with_state(
        PredictState(total_votes=launch.total_votes, median_mcap=median_mcap, total_locked=0)
    )


def settle(launch: Launch, settlement_value: int, now: int) -> Launch:
    require_phase(launch, Phase.PREDICT)
    if now < launch.predict_end:
        raise PhaseNotEnded(f"predict ends at {launch.predict_end}, now {now}")
    if settlement_value <= 0:
        raise ValidationError("Invalid settlement value")
    check_width("settlement_value", settlement_value, U64_MAX)
    state = launch.state
    return launch.with_state(
        SettledState(
            total_votes=state.total_votes,
            median_mcap=state.median_mcap,
            total_locked=state.total_locked,
            settlement_value=settlement_value,
        )
    )


def check_monotonic(old: Launch, new: Launch) -> None:
    """Guard applied by stores on every launch write."""
    if new.launch_id != old.launch_id:
        raise ValueError("launch_id cannot change")
    if (new.discovery_end, new.predict_end) != (old.discovery_end, old.predict_end):
        raise ValueError(f"deadlines of {old.launch_id} are immutable")
    if new.phase.rank < old.phase.rank:
        raise ValueError(f"phase of {old.launch_id} cannot move back to {new.phase.value}")
    if new.total_votes < old.total_votes or new.total_locked < old.total_locked:
        raise ValueError(f"counters of {old.launch_id} cannot decrease")
    if new.total_distributed < old.total_distributed:
        raise ValueError(f"distributed total of {old.launch_id} cannot decrease")
    for field in ("median_mcap", "settlement_value"):
        before = getattr(old, field)
        if before is not None and getattr(new, field) != before:
            raise ValueError(f"{field} of {old.launch_id} is write-once")
