"""Pydantic schemas for trips, members, days, blocks and activities."""
from __future__ import annotations
import datetime as dt
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional
from pydantic import BaseModel, Field


class TripCreate(BaseModel):
    name: str
    organizer_name: str
    organizer_user_id: Optional[str] = None
    destination: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    timezone: str = "UTC"  # IANA tz
    currency: str = Field("USD", min_length=3, max_length=3)
    duplicate_policy: str = "soft_block"  # soft_block, prevent, allow


class TripOut(BaseModel):
    id: str
    name: str
    destination: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    timezone: str
    currency: str
    duplicate_policy: str
    members: list[MemberOut] = []

    model_config = {"from_attributes": True}


class DuplicatePolicyUpdate(BaseModel):
    member_id: str
    duplicate_policy: str


class MemberAdd(BaseModel):
    display_name: str
    role: str = "collaborator"
    user_id: Optional[str] = None


class MemberOut(BaseModel):
    id: str
    trip_id: str
    role: str
    display_name: str
    user_id: Optional[str] = None

    model_config = {"from_attributes": True}


class DayCreate(BaseModel):
    date: dt.date


class DayOut(BaseModel):
    id: str
    trip_id: str
    date: dt.date

    model_config = {"from_attributes": True}


class BlockCreate(BaseModel):
    label: str
    position: int = 0
    vote_open_ts: Optional[datetime] = None
    vote_close_ts: Optional[datetime] = None


class BlockOut(BaseModel):
    id: str
    day_id: str
    label: str
    position: int
    vote_open_ts: Optional[datetime] = None
    vote_close_ts: Optional[datetime] = None

    model_config = {"from_attributes": True}


class VotingWindowUpdate(BaseModel):
    member_id: str
    vote_open_ts: Optional[datetime] = None
    vote_close_ts: Optional[datetime] = None


class ActivityCreate(BaseModel):
    title: str
    category: Optional[str] = None
    cost_amount: Optional[Decimal] = None
    cost_currency: Optional[str] = Field(None, min_length=3, max_length=3)
    duration_min: Optional[int] = Field(None, ge=0)
    location: Optional[dict[str, Any]] = None
    notes: Optional[str] = None


class ActivityOut(BaseModel):
    id: str
    trip_id: str
    title: str
    category: Optional[str] = None
    cost_amount: Optional[Decimal] = None
    cost_currency: Optional[str] = None
    duration_min: Optional[int] = None
    location: Optional[dict[str, Any]] = None
    notes: Optional[str] = None

    model_config = {"from_attributes": True}


# Rebuild TripOut now that MemberOut is defined
TripOut.model_rebuild()
