"""Trip setup API routes: trips, members, days, blocks, activities, settings."""
import logging
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.trip import (
    ActivityCreate,
    ActivityOut,
    BlockCreate,
    BlockOut,
    DayCreate,
    DayOut,
    DuplicatePolicyUpdate,
    MemberAdd,
    MemberOut,
    TripCreate,
    TripOut,
    VotingWindowUpdate,
)
from app.services import access, trip_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=TripOut, status_code=status.HTTP_201_CREATED)
def create_trip(payload: TripCreate, db: Session = Depends(get_db)):
    """Create a trip. The creator is automatically added as organizer."""
    return trip_service.create_trip(db, **payload.model_dump())


@router.get("/{trip_id}", response_model=TripOut)
def get_trip(trip_id: str, db: Session = Depends(get_db)):
    return access.get_trip(db, trip_id)


@router.patch("/{trip_id}/duplicate-policy", response_model=TripOut)
def update_duplicate_policy(trip_id: str, payload: DuplicatePolicyUpdate, db: Session = Depends(get_db)):
    """Change the duplicate policy (organizer only, before any commit exists)."""
    return trip_service.update_duplicate_policy(db, trip_id, payload.member_id, payload.duplicate_policy)


@router.post("/{trip_id}/members", response_model=MemberOut, status_code=status.HTTP_201_CREATED)
def add_member(trip_id: str, payload: MemberAdd, db: Session = Depends(get_db)):
    return trip_service.add_member(db, trip_id, payload.display_name, payload.role, payload.user_id)


@router.post("/{trip_id}/days", response_model=DayOut, status_code=status.HTTP_201_CREATED)
def add_day(trip_id: str, payload: DayCreate, db: Session = Depends(get_db)):
    return trip_service.add_day(db, trip_id, payload.date)


@router.post("/{trip_id}/days/{day_id}/blocks", response_model=BlockOut, status_code=status.HTTP_201_CREATED)
def add_block(trip_id: str, day_id: str, payload: BlockCreate, db: Session = Depends(get_db)):
    return trip_service.add_block(db, trip_id, day_id, **payload.model_dump())


@router.post("/{trip_id}/activities", response_model=ActivityOut, status_code=status.HTTP_201_CREATED)
def add_activity(trip_id: str, payload: ActivityCreate, db: Session = Depends(get_db)):
    details = payload.model_dump(exclude={"title"})
    return trip_service.add_activity(db, trip_id, payload.title, **details)


@router.put("/{trip_id}/blocks/{block_id}/voting-window", response_model=BlockOut)
def set_voting_window(trip_id: str, block_id: str, payload: VotingWindowUpdate, db: Session = Depends(get_db)):
    """Open/close voting for a block (organizer only)."""
    return trip_service.set_voting_window(
        db, trip_id, block_id, payload.member_id, payload.vote_open_ts, payload.vote_close_ts
    )


@router.delete("/{trip_id}/blocks/{block_id}/voting-window", response_model=BlockOut)
def clear_voting_window(
    trip_id: str,
    block_id: str,
    member_id: str = Query(..., description="ID of the acting trip member"),
    db: Session = Depends(get_db),
):
    return trip_service.clear_voting_window(db, trip_id, block_id, member_id)
