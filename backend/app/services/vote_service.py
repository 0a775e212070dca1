"""Vote ledger: idempotent vote casting.

A member may hold votes for several activities of the same block at once;
each (block, activity, member) triple is independent and stored at most once.
"""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.clock import Clock, as_utc, utc_now
from app.models.itinerary import Block
from app.models.proposal import BlockProposal
from app.models.trip import MemberRole
from app.models.vote import Vote
from app.services.access import (
    find_commit,
    get_activity_in_trip,
    get_block_in_trip,
    get_trip,
    resolve_member,
)
from app.services.errors import AlreadyCommitted, Forbidden, NotFound, VotingClosed, storage_bound

logger = logging.getLogger(__name__)


def check_voting_window(block: Block, clock: Clock = utc_now) -> None:
    """Raise ``VotingClosed`` unless ``clock()`` falls inside the block's window."""
    now = clock()
    opens = as_utc(block.vote_open_ts)
    closes = as_utc(block.vote_close_ts)
    if opens is not None and now < opens:
        raise VotingClosed("Voting has not started yet for this block", vote_open_ts=opens.isoformat())
    if closes is not None and now > closes:
        raise VotingClosed("Voting has ended for this block", vote_close_ts=closes.isoformat())


def _existing_vote(db: Session, block_id: str, activity_id: str, member_id: str) -> Optional[Vote]:
    return (
        db.query(Vote)
        .filter(Vote.block_id == block_id, Vote.activity_id == activity_id, Vote.member_id == member_id)
        .first()
    )


@storage_bound
def cast_vote(
    db: Session,
    trip_id: str,
    block_id: str,
    activity_id: str,
    member_id: str,
    on_behalf_of: Optional[str] = None,
    clock: Clock = utc_now,
) -> tuple[Vote, bool]:
    """Record a vote; return ``(vote, created)``.

    Re-casting an existing vote returns the stored row with ``created=False``.
    Organizers may vote on behalf of another member via ``on_behalf_of``.
    """
    get_trip(db, trip_id)
    block = get_block_in_trip(db, trip_id, block_id)
    get_activity_in_trip(db, trip_id, activity_id)
    actor = resolve_member(db, trip_id, member_id)

    voter_id = actor.id
    if on_behalf_of and on_behalf_of != actor.id:
        if actor.role != MemberRole.organizer:
            raise Forbidden("Only organizers can vote on behalf of others", member_id=member_id)
        voter_id = resolve_member(db, trip_id, on_behalf_of).id

    check_voting_window(block, clock)

    if find_commit(db, block_id):
        raise AlreadyCommitted("This block has already been committed", block_id=block_id)

    proposal = (
        db.query(BlockProposal)
        .filter(BlockProposal.block_id == block_id, BlockProposal.activity_id == activity_id)
        .first()
    )
    if not proposal:
        raise NotFound("Activity has not been proposed for this block", activity_id=activity_id)

    existing = _existing_vote(db, block_id, activity_id, voter_id)
    if existing:
        logger.debug("Vote already cast by %s for %s in block %s", voter_id, activity_id, block_id)
        return existing, False

    vote = Vote(trip_id=trip_id, block_id=block_id, activity_id=activity_id, member_id=voter_id)
    db.add(vote)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent cast of the same triple won the insert
        db.rollback()
        existing = _existing_vote(db, block_id, activity_id, voter_id)
        if existing is None:
            raise
        return existing, False
    db.refresh(vote)
    logger.info("Member %s voted for activity %s in block %s", voter_id, activity_id, block_id)
    return vote, True


@storage_bound
def list_votes(db: Session, trip_id: str, block_id: str) -> list[Vote]:
    get_block_in_trip(db, trip_id, block_id)
    return db.query(Vote).filter(Vote.block_id == block_id).all()
