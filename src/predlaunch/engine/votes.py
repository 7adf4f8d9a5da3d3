"""Vote ledger - discovery-phase valuation votes."""

from __future__ import annotations

from predlaunch.engine.phase import require_phase
from predlaunch.errors import PhaseEnded, ValidationError
from predlaunch.kernel.arithmetic import U32_MAX, U64_MAX, check_width, checked_add
from predlaunch.models.launch import Launch, Phase
from predlaunch.models.ledger import Vote


def submit_vote(launch: Launch, voter: str, mcap_vote: int, now: int) -> tuple[Launch, Vote]:
    """Return (launch with total_votes + 1, new Vote). Uniqueness per voter is the store's job."""
    require_phase(launch, Phase.DISCOVERY)
    if now >= launch.discovery_end:
        raise PhaseEnded(f"discovery ended at {launch.discovery_end}")
    if mcap_vote <= 0:
        raise ValidationError("Invalid vote amount")
    check_width("mcap_vote", mcap_vote, U64_MAX)

    total_votes = checked_add("total_votes", launch.total_votes, 1, U32_MAX)
    vote = Vote(launch_id=launch.launch_id, voter=voter, mcap_vote=mcap_vote, timestamp=now)
    updated = launch.with_state(launch.state.model_copy(update={"total_votes": total_votes}))
    return updated, vote
