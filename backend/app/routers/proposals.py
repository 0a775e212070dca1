"""Proposal API routes: nominate activities for a block."""
import logging
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.voting import BlockResetOut, BlockResetRequest, ProposalCreate, ProposalOut
from app.services import proposal_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/{trip_id}/blocks/{block_id}/proposals", response_model=ProposalOut, status_code=status.HTTP_201_CREATED)
def create_proposal(trip_id: str, block_id: str, payload: ProposalCreate, db: Session = Depends(get_db)):
    return proposal_service.create_proposal(db, trip_id, block_id, payload.activity_id, payload.member_id)


@router.get("/{trip_id}/blocks/{block_id}/proposals", response_model=list[ProposalOut])
def list_proposals(trip_id: str, block_id: str, db: Session = Depends(get_db)):
    return proposal_service.list_proposals(db, trip_id, block_id)


@router.delete("/{trip_id}/blocks/{block_id}/proposals/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_proposal(
    trip_id: str,
    block_id: str,
    activity_id: str,
    member_id: str = Query(..., description="ID of the acting trip member"),
    db: Session = Depends(get_db),
):
    proposal_service.remove_proposal(db, trip_id, block_id, activity_id, member_id)


@router.post("/{trip_id}/blocks/{block_id}/reset", response_model=BlockResetOut)
def reset_block(trip_id: str, block_id: str, payload: BlockResetRequest, db: Session = Depends(get_db)):
    """Clear all proposals and votes of an open block (organizer only)."""
    return proposal_service.reset_block(db, trip_id, block_id, payload.member_id)
