"""Canonical schema (Pydantic) - Launch, Vote, Bet, notifications."""

from predlaunch.models.events import (
    BetPlaced,
    LaunchCreated,
    LaunchEvent,
    LaunchSettled,
    PredictStarted,
    TokensClaimed,
    VoteSubmitted,
)
from predlaunch.models.launch import (
    DiscoveryState,
    Launch,
    Phase,
    PhaseState,
    PredictState,
    SettledState,
)
from predlaunch.models.ledger import Bet, ClaimResult, Vote

__all__ = [
    "Launch",
    "Phase",
    "PhaseState",
    "DiscoveryState",
    "PredictState",
    "SettledState",
    "Vote",
    "Bet",
    "ClaimResult",
    "LaunchEvent",
    "LaunchCreated",
    "VoteSubmitted",
    "PredictStarted",
    "BetPlaced",
    "LaunchSettled",
    "TokensClaimed",
]
