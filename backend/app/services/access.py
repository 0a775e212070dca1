"""Trip-scoped lookups and the organizer gate shared by every service."""
from typing import Optional

from sqlalchemy.orm import Session

from app.models.activity import Activity
from app.models.commit import Commit
from app.models.itinerary import Block, Day
from app.models.trip import MemberRole, Trip, TripMember
from app.services.errors import Forbidden, NotFound


def get_trip(db: Session, trip_id: str) -> Trip:
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if not trip:
        raise NotFound("Trip not found", trip_id=trip_id)
    return trip


def get_block_in_trip(db: Session, trip_id: str, block_id: str) -> Block:
    """Fetch a block, requiring its day to belong to the trip."""
    block = (
        db.query(Block)
        .join(Day, Block.day_id == Day.id)
        .filter(Block.id == block_id, Day.trip_id == trip_id)
        .first()
    )
    if not block:
        raise NotFound("Block not found in this trip", block_id=block_id)
    return block


def get_activity_in_trip(db: Session, trip_id: str, activity_id: str) -> Activity:
    activity = (
        db.query(Activity)
        .filter(Activity.id == activity_id, Activity.trip_id == trip_id)
        .first()
    )
    if not activity:
        raise NotFound("Activity not found in this trip", activity_id=activity_id)
    return activity


def resolve_member(db: Session, trip_id: str, member_id: str) -> TripMember:
    """Resolve the acting member within the trip; outsiders are forbidden."""
    member = (
        db.query(TripMember)
        .filter(TripMember.id == member_id, TripMember.trip_id == trip_id)
        .first()
    )
    if not member:
        raise Forbidden("Not a member of this trip", member_id=member_id)
    return member


def require_organizer(db: Session, trip_id: str, member_id: str) -> TripMember:
    """Role is the sole authorization gate for commit, uncommit and swap."""
    member = resolve_member(db, trip_id, member_id)
    if member.role != MemberRole.organizer:
        raise Forbidden("Only trip organizers may perform this action", member_id=member_id)
    return member


def find_commit(db: Session, block_id: str) -> Optional[Commit]:
    return db.query(Commit).filter(Commit.block_id == block_id).first()
