"""Proposal store: which activities are candidates for which block."""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.proposal import BlockProposal
from app.models.vote import Vote
from app.services.access import (
    find_commit,
    get_activity_in_trip,
    get_block_in_trip,
    get_trip,
    require_organizer,
    resolve_member,
)
from app.services.errors import AlreadyCommitted, NotFound, ProposalExists, storage_bound

logger = logging.getLogger(__name__)


def _ensure_open(db: Session, block_id: str) -> None:
    if find_commit(db, block_id):
        raise AlreadyCommitted("Block is already committed", block_id=block_id)


@storage_bound
def create_proposal(db: Session, trip_id: str, block_id: str, activity_id: str, member_id: str) -> BlockProposal:
    get_trip(db, trip_id)
    get_block_in_trip(db, trip_id, block_id)
    get_activity_in_trip(db, trip_id, activity_id)
    member = resolve_member(db, trip_id, member_id)
    _ensure_open(db, block_id)

    existing = (
        db.query(BlockProposal)
        .filter(BlockProposal.block_id == block_id, BlockProposal.activity_id == activity_id)
        .first()
    )
    if existing:
        raise ProposalExists("Activity is already proposed for this block", proposal_id=existing.id)

    proposal = BlockProposal(trip_id=trip_id, block_id=block_id, activity_id=activity_id, created_by=member.id)
    db.add(proposal)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ProposalExists("Activity is already proposed for this block") from None
    db.refresh(proposal)
    logger.info("Member %s proposed activity %s for block %s", member.id, activity_id, block_id)
    return proposal


@storage_bound
def list_proposals(db: Session, trip_id: str, block_id: str) -> list[BlockProposal]:
    get_block_in_trip(db, trip_id, block_id)
    return (
        db.query(BlockProposal)
        .filter(BlockProposal.block_id == block_id)
        .order_by(BlockProposal.created_at)
        .all()
    )


@storage_bound
def remove_proposal(db: Session, trip_id: str, block_id: str, activity_id: str, member_id: str) -> None:
    """Withdraw a proposal from an open block."""
    get_block_in_trip(db, trip_id, block_id)
    resolve_member(db, trip_id, member_id)
    proposal = (
        db.query(BlockProposal)
        .filter(BlockProposal.block_id == block_id, BlockProposal.activity_id == activity_id)
        .first()
    )
    if not proposal:
        raise NotFound("Proposal not found", activity_id=activity_id)
    _ensure_open(db, block_id)
    db.delete(proposal)
    db.commit()
    logger.info("Removed proposal of activity %s from block %s", activity_id, block_id)


@storage_bound
def reset_block(db: Session, trip_id: str, block_id: str, member_id: str) -> dict[str, int]:
    """Clear every proposal and vote of an open block (organizer only)."""
    get_block_in_trip(db, trip_id, block_id)
    require_organizer(db, trip_id, member_id)
    _ensure_open(db, block_id)

    votes = db.query(Vote).filter(Vote.block_id == block_id).delete(synchronize_session=False)
    proposals = (
        db.query(BlockProposal)
        .filter(BlockProposal.block_id == block_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    logger.info("Reset block %s: removed %d proposal(s) and %d vote(s)", block_id, proposals, votes)
    return {"removed_proposals": proposals, "removed_votes": votes}
