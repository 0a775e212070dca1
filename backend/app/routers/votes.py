"""Vote API routes: cast votes and read the tally."""
import logging
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.clock import Clock, get_clock
from app.database import get_db
from app.schemas.voting import TallyOut, VoteCast, VoteCastOut, VoteOut
from app.services import tally_service, vote_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/{trip_id}/blocks/{block_id}/votes", response_model=VoteCastOut)
def cast_vote(
    trip_id: str,
    block_id: str,
    payload: VoteCast,
    response: Response,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Cast a vote. Re-casting the same vote is a no-op (200 instead of 201)."""
    vote, created = vote_service.cast_vote(
        db,
        trip_id,
        block_id,
        payload.activity_id,
        payload.member_id,
        on_behalf_of=payload.on_behalf_of,
        clock=clock,
    )
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return {"vote": VoteOut.model_validate(vote), "created": created}


@router.get("/{trip_id}/blocks/{block_id}/votes", response_model=list[VoteOut])
def list_votes(trip_id: str, block_id: str, db: Session = Depends(get_db)):
    return vote_service.list_votes(db, trip_id, block_id)


@router.get("/{trip_id}/blocks/{block_id}/tally", response_model=TallyOut)
def get_tally(trip_id: str, block_id: str, db: Session = Depends(get_db)):
    tally = tally_service.get_tally(db, trip_id, block_id)
    return TallyOut.model_validate(tally, from_attributes=True)
