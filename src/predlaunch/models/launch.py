"""Launch record and its per-phase state variants."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Phase(str, Enum):
    DISCOVERY = "discovery"
    PREDICT = "predict"
    SETTLED = "settled"

    @property
    def rank(self) -> int:
        return _PHASE_ORDER.index(self)


_PHASE_ORDER = [Phase.DISCOVERY, Phase.PREDICT, Phase.SETTLED]


class DiscoveryState(BaseModel):
    """Votes are open. No median yet."""

    model_config = ConfigDict(frozen=True)

    phase: Literal["discovery"] = "discovery"
    total_votes: int = Field(0, ge=0)


class PredictState(BaseModel):
    """Median committed, bets are open."""

    model_config = ConfigDict(frozen=True)

    phase: Literal["predict"] = "predict"
    total_votes: int = Field(0, ge=0)
    median_mcap: int = Field(..., gt=0)
    total_locked: int = Field(0, ge=0)  # smallest currency units


class SettledState(BaseModel):
    """Settlement committed, claims are open."""

    model_config = ConfigDict(frozen=True)

    phase: Literal["settled"] = "settled"
    total_votes: int = Field(0, ge=0)
    median_mcap: int = Field(..., gt=0)
    total_locked: int = Field(0, ge=0)
    settlement_value: int = Field(..., gt=0)
    total_distributed: int = Field(0, ge=0)  # sum of tokens returned by claims


PhaseState = Annotated[
    Union[DiscoveryState, PredictState, SettledState],
    Field(discriminator="phase"),
]


class Launch(BaseModel):
    """One token launch. Immutable: transitions return a new record."""

    model_config = ConfigDict(frozen=True)

    launch_id: str
    authority: str
    name: str = Field(..., max_length=32)
    symbol: str = Field(..., max_length=10)
    total_supply: int = Field(..., ge=0)
    discovery_end: int  # unix seconds
    predict_end: int  # unix seconds
    created_at: int
    state: PhaseState = Field(default_factory=DiscoveryState)

    @property
    def phase(self) -> Phase:
        return Phase(self.state.phase)

    @property
    def total_votes(self) -> int:
        return self.state.total_votes

    @property
    def median_mcap(self) -> int | None:
        return getattr(self.state, "median_mcap", None)

    @property
    def total_locked(self) -> int:
        return getattr(self.state, "total_locked", 0)

    @property
    def settlement_value(self) -> int | None:
        return getattr(self.state, "settlement_value", None)

    @property
    def total_distributed(self) -> int:
        return getattr(self.state, "total_distributed", 0)

    def with_state(self, state: DiscoveryState | PredictState | SettledState) -> Launch:
        return self.model_copy(update={"state": state})
