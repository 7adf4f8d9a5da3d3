"""Notifications emitted after each committed operation."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class EventBase(BaseModel):
    launch_id: str
    ts: int


class LaunchCreated(EventBase):
    event_type: Literal["launch_created"] = "launch_created"
    name: str
    symbol: str
    discovery_end: int
    predict_end: int


class VoteSubmitted(EventBase):
    event_type: Literal["vote_submitted"] = "vote_submitted"
    voter: str
    mcap_vote: int


class PredictStarted(EventBase):
    event_type: Literal["predict_started"] = "predict_started"
    median_mcap: int


class BetPlaced(EventBase):
    event_type: Literal["bet_placed"] = "bet_placed"
    bet_id: str
    bettor: str
    breakpoint: int
    is_yes: bool
    amount: int
    multiplier: int


class LaunchSettled(EventBase):
    event_type: Literal["launch_settled"] = "launch_settled"
    settlement_value: int
    total_locked: int


class TokensClaimed(EventBase):
    event_type: Literal["tokens_claimed"] = "tokens_claimed"
    bet_id: str
    claimer: str
    tokens: int
    accuracy: int


LaunchEvent = Annotated[
    Union[LaunchCreated, VoteSubmitted, PredictStarted, BetPlaced, LaunchSettled, TokensClaimed],
    Field(discriminator="event_type"),
]
