"""Pydantic schemas for proposals, votes, tallies and commits."""
from __future__ import annotations
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel

from app.schemas.trip import ActivityOut


class ProposalCreate(BaseModel):
    activity_id: str
    member_id: str


class ProposalOut(BaseModel):
    id: str
    trip_id: str
    block_id: str
    activity_id: str
    created_by: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class BlockResetRequest(BaseModel):
    member_id: str


class BlockResetOut(BaseModel):
    removed_proposals: int
    removed_votes: int


class VoteCast(BaseModel):
    activity_id: str
    member_id: str
    on_behalf_of: Optional[str] = None  # organizers only


class VoteOut(BaseModel):
    id: str
    trip_id: str
    block_id: str
    activity_id: str
    member_id: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class VoteCastOut(BaseModel):
    vote: VoteOut
    created: bool


class TallyEntryOut(BaseModel):
    activity_id: str
    activity_title: str
    vote_count: int

    model_config = {"from_attributes": True}


class TallyOut(BaseModel):
    block_id: Optional[str] = None
    entries: list[TallyEntryOut] = []
    total_votes: int
    unique_voters: int
    is_tie: bool
    tied: list[TallyEntryOut] = []

    model_config = {"from_attributes": True}


class CommitRequest(BaseModel):
    member_id: str
    manual_activity_id: Optional[str] = None  # tie-break path
    confirm_duplicate: bool = False  # soft_block second phase


class CommitOut(BaseModel):
    id: str
    trip_id: str
    block_id: Optional[str] = None
    activity_id: str
    committed_by: str
    committed_at: datetime
    activity: Optional[ActivityOut] = None

    model_config = {"from_attributes": True}


class CommitResultOut(BaseModel):
    success: bool
    reason: Optional[str] = None  # tie_detected, duplicate_warning
    message: Optional[str] = None
    commit: Optional[CommitOut] = None
    tally: Optional[TallyOut] = None
    duplicate_policy: Optional[str] = None
    tied_activities: list[TallyEntryOut] = []
    existing_locations: list[dict[str, Any]] = []
    removed_proposals: int = 0

    model_config = {"from_attributes": True}


class SwapRequest(BaseModel):
    member_id: str
    block_id_1: str
    block_id_2: str


class SwapOut(BaseModel):
    block_1: CommitOut
    block_2: CommitOut
