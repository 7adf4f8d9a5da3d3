"""Vote and Bet records, plus the claim outcome handed to the minter."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Vote(BaseModel):
    """Discovery-phase valuation vote. One per (launch_id, voter)."""

    model_config = ConfigDict(frozen=True)

    launch_id: str
    voter: str
    mcap_vote: int = Field(..., gt=0)
    timestamp: int


class Bet(BaseModel):
    """Predict-phase stake on a breakpoint. Only `claimed` ever changes."""

    model_config = ConfigDict(frozen=True)

    bet_id: str
    launch_id: str
    bettor: str
    breakpoint: int = Field(..., gt=0)
    is_yes: bool
    amount: int = Field(..., gt=0)  # smallest currency units
    multiplier: int = Field(..., gt=0, description="Basis points, 150 = 1.5x")
    timestamp: int
    claimed: bool = False


class ClaimResult(BaseModel):
    launch_id: str
    bet_id: str
    claimer: str
    tokens: int = Field(..., ge=0)
    accuracy: int = Field(..., ge=0, le=10_000)
    weight: int = Field(..., ge=0)
    participant_pool: int = Field(..., ge=0)
