"""Commit API routes: commit, uncommit, swap and read commits.

Ties and soft-block duplicate warnings come back as 200 with
``success: false``; the client re-posts with ``manual_activity_id`` or
``confirm_duplicate`` to proceed.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.clock import Clock, get_clock
from app.database import get_db
from app.schemas.voting import CommitOut, CommitRequest, CommitResultOut, SwapOut, SwapRequest
from app.services import commit_service, swap_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/{trip_id}/blocks/{block_id}/commit", response_model=CommitResultOut)
def commit_block(
    trip_id: str,
    block_id: str,
    payload: CommitRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    outcome = commit_service.commit_block(
        db,
        trip_id,
        block_id,
        payload.member_id,
        manual_activity_id=payload.manual_activity_id,
        confirm_duplicate=payload.confirm_duplicate,
        clock=clock,
    )
    return CommitResultOut.model_validate(outcome, from_attributes=True)


@router.get("/{trip_id}/blocks/{block_id}/commit", response_model=Optional[CommitOut])
def get_commit(trip_id: str, block_id: str, db: Session = Depends(get_db)):
    """The block's commit, or null while the block is open."""
    return commit_service.get_commit(db, trip_id, block_id)


@router.delete("/{trip_id}/blocks/{block_id}/commit", status_code=status.HTTP_204_NO_CONTENT)
def uncommit_block(
    trip_id: str,
    block_id: str,
    member_id: str = Query(..., description="ID of the acting trip member"),
    db: Session = Depends(get_db),
):
    commit_service.uncommit_block(db, trip_id, block_id, member_id)


@router.get("/{trip_id}/commits", response_model=list[CommitOut])
def list_commits(trip_id: str, db: Session = Depends(get_db)):
    return commit_service.list_commits(db, trip_id)


@router.post("/{trip_id}/commits/swap", response_model=SwapOut)
def swap_commits(trip_id: str, payload: SwapRequest, db: Session = Depends(get_db)):
    """Exchange the committed activities of two blocks (organizer only)."""
    block_1, block_2 = swap_service.swap_commits(
        db, trip_id, payload.block_id_1, payload.block_id_2, payload.member_id
    )
    return {"block_1": CommitOut.model_validate(block_1), "block_2": CommitOut.model_validate(block_2)}
