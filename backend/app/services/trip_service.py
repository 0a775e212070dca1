"""Trip setup and organizer settings that feed the voting core.

Plain data entry (trips, members, days, blocks, activities) plus the two
organizer settings the core reads: the duplicate policy and per-block voting
windows.
"""
import logging
from datetime import date, datetime
from typing import Any, Optional

import pytz
from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.clock import as_utc
from app.models.activity import Activity
from app.models.commit import Commit
from app.models.itinerary import Block, Day
from app.models.trip import DuplicatePolicy, MemberRole, Trip, TripMember
from app.services.access import get_block_in_trip, get_trip, require_organizer
from app.services.errors import InvalidVotingWindow, NotFound, PolicyLocked, storage_bound

logger = logging.getLogger(__name__)


def _validate_timezone(tz_name: str) -> str:
    try:
        pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        raise HTTPException(status_code=400, detail=f"Invalid IANA timezone: {tz_name}")
    return tz_name


@storage_bound
def create_trip(
    db: Session,
    name: str,
    organizer_name: str,
    organizer_user_id: Optional[str] = None,
    destination: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    timezone: str = "UTC",
    currency: str = "USD",
    duplicate_policy: str = "soft_block",
) -> Trip:
    """Create a trip. The creator is added as its organizer."""
    if start_date and end_date and end_date < start_date:
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")
    try:
        policy = DuplicatePolicy(duplicate_policy)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid duplicate policy: {duplicate_policy}")

    trip = Trip(
        name=name,
        destination=destination,
        start_date=start_date,
        end_date=end_date,
        timezone=_validate_timezone(timezone),
        currency=currency.upper(),
        duplicate_policy=policy,
    )
    db.add(trip)
    db.flush()

    organizer = TripMember(
        trip_id=trip.id,
        role=MemberRole.organizer,
        display_name=organizer_name,
        user_id=organizer_user_id,
    )
    db.add(organizer)
    db.commit()
    db.refresh(trip)
    logger.info("Created trip '%s' (%s) with organizer %s", name, trip.id, organizer.id)
    return trip


@storage_bound
def add_member(
    db: Session,
    trip_id: str,
    display_name: str,
    role: str = "collaborator",
    user_id: Optional[str] = None,
) -> TripMember:
    get_trip(db, trip_id)
    try:
        member_role = MemberRole(role)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid role: {role}")
    member = TripMember(trip_id=trip_id, role=member_role, display_name=display_name, user_id=user_id)
    db.add(member)
    db.commit()
    db.refresh(member)
    logger.info("Added member %s to trip %s as %s", member.id, trip_id, role)
    return member


@storage_bound
def add_day(db: Session, trip_id: str, day_date: date) -> Day:
    get_trip(db, trip_id)
    day = Day(trip_id=trip_id, date=day_date)
    db.add(day)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=f"Day {day_date.isoformat()} already exists in this trip")
    db.refresh(day)
    return day


@storage_bound
def add_block(
    db: Session,
    trip_id: str,
    day_id: str,
    label: str,
    position: int = 0,
    vote_open_ts: Optional[datetime] = None,
    vote_close_ts: Optional[datetime] = None,
) -> Block:
    day = db.query(Day).filter(Day.id == day_id, Day.trip_id == trip_id).first()
    if not day:
        raise NotFound("Day not found in this trip", day_id=day_id)
    _check_window(vote_open_ts, vote_close_ts)
    block = Block(
        day_id=day_id,
        label=label,
        position=position,
        vote_open_ts=as_utc(vote_open_ts),
        vote_close_ts=as_utc(vote_close_ts),
    )
    db.add(block)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=f"Block '{label}' already exists on this day")
    db.refresh(block)
    return block


@storage_bound
def add_activity(db: Session, trip_id: str, title: str, **details: Any) -> Activity:
    get_trip(db, trip_id)
    activity = Activity(trip_id=trip_id, title=title, **details)
    db.add(activity)
    db.commit()
    db.refresh(activity)
    logger.info("Added activity '%s' (%s) to trip %s", title, activity.id, trip_id)
    return activity


@storage_bound
def update_duplicate_policy(db: Session, trip_id: str, member_id: str, duplicate_policy: str) -> Trip:
    """Change the duplicate policy; only allowed before the first commit."""
    trip = get_trip(db, trip_id)
    require_organizer(db, trip_id, member_id)
    try:
        policy = DuplicatePolicy(duplicate_policy)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid duplicate policy: {duplicate_policy}")

    if policy != trip.duplicate_policy:
        has_commits = db.query(Commit.id).filter(Commit.trip_id == trip_id).first() is not None
        if has_commits:
            raise PolicyLocked(
                "Duplicate policy cannot change once blocks are committed",
                duplicate_policy=trip.duplicate_policy.value,
            )
        trip.duplicate_policy = policy
        db.commit()
        db.refresh(trip)
        logger.info("Trip %s duplicate policy set to %s", trip_id, policy.value)
    return trip


def _check_window(vote_open_ts: Optional[datetime], vote_close_ts: Optional[datetime]) -> None:
    if vote_open_ts and vote_close_ts and as_utc(vote_open_ts) >= as_utc(vote_close_ts):
        raise InvalidVotingWindow("Voting must open before it closes")


@storage_bound
def set_voting_window(
    db: Session,
    trip_id: str,
    block_id: str,
    member_id: str,
    vote_open_ts: Optional[datetime],
    vote_close_ts: Optional[datetime],
) -> Block:
    block = get_block_in_trip(db, trip_id, block_id)
    require_organizer(db, trip_id, member_id)
    _check_window(vote_open_ts, vote_close_ts)
    block.vote_open_ts = as_utc(vote_open_ts)
    block.vote_close_ts = as_utc(vote_close_ts)
    db.commit()
    db.refresh(block)
    logger.info("Voting window for block %s set to %s - %s", block_id, vote_open_ts, vote_close_ts)
    return block


@storage_bound
def clear_voting_window(db: Session, trip_id: str, block_id: str, member_id: str) -> Block:
    return set_voting_window(db, trip_id, block_id, member_id, None, None)
