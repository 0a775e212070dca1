"""Commitment engine: locks a block's winning activity into the itinerary.

Block states are ``Open`` (no commit row) and ``Committed`` (exactly one).
The unique constraint on ``commits.block_id`` is the linearization point for
concurrent commit attempts: every check before the insert is advisory, and a
losing insert is reported as ``AlreadyCommitted``.

Responsibilities:
- Authorization: organizer only
- Winner resolution from the tally, with manual tie-break
- Duplicate policy (allow / soft_block with confirmation / prevent)
- Soft-block cleanup of superseded proposals (best effort)
- Uncommit and read access to commits
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.clock import Clock, utc_now
from app.config import settings
from app.models.commit import Commit
from app.models.itinerary import Block, Day
from app.models.proposal import BlockProposal
from app.models.trip import DuplicatePolicy
from app.services.access import (
    find_commit,
    get_activity_in_trip,
    get_block_in_trip,
    get_trip,
    require_organizer,
)
from app.services.errors import (
    AlreadyCommitted,
    DuplicateForbidden,
    InvalidTieBreak,
    NoVotes,
    NotCommitted,
    storage_bound,
)
from app.services.tally_service import Tally, TallyEntry, get_tally

logger = logging.getLogger(__name__)

TIE_DETECTED = "tie_detected"
DUPLICATE_WARNING = "duplicate_warning"


@dataclass
class CommitOutcome:
    """Result of ``commit_block``.

    ``success=False`` marks a soft failure: ``reason`` says which, and the
    caller re-invokes with ``manual_activity_id`` or ``confirm_duplicate``.
    """

    success: bool
    reason: Optional[str] = None
    message: Optional[str] = None
    commit: Optional[Commit] = None
    tally: Optional[Tally] = None
    duplicate_policy: Optional[DuplicatePolicy] = None
    tied_activities: list[TallyEntry] = field(default_factory=list)
    existing_locations: list[dict[str, Any]] = field(default_factory=list)
    removed_proposals: int = 0


def _existing_locations(db: Session, trip_id: str, activity_id: str) -> list[dict[str, Any]]:
    """Where else in the trip this activity is already committed."""
    rows = (
        db.query(Commit, Block, Day)
        .join(Block, Commit.block_id == Block.id)
        .join(Day, Block.day_id == Day.id)
        .filter(Commit.trip_id == trip_id, Commit.activity_id == activity_id)
        .all()
    )
    return [
        {
            "block_id": block.id,
            "block_label": block.label,
            "day_id": day.id,
            "date": day.date.isoformat(),
        }
        for _, block, day in rows
    ]


def _remove_superseded_proposals(db: Session, trip_id: str, block_id: str, activity_id: str) -> int:
    """Drop proposals of ``activity_id`` in every other block of the trip.

    Runs after the commit is durable. Failure leaves stale proposals behind,
    which is logged but never undoes the commit.
    """
    try:
        removed = (
            db.query(BlockProposal)
            .filter(
                BlockProposal.trip_id == trip_id,
                BlockProposal.activity_id == activity_id,
                BlockProposal.block_id != block_id,
            )
            .delete(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "Proposal cleanup failed for activity %s after commit of block %s", activity_id, block_id
        )
        return 0
    if removed:
        logger.info("Removed %d superseded proposal(s) of activity %s", removed, activity_id)
    return removed


@storage_bound
def commit_block(
    db: Session,
    trip_id: str,
    block_id: str,
    member_id: str,
    manual_activity_id: Optional[str] = None,
    confirm_duplicate: bool = False,
    clock: Clock = utc_now,
    strict_tie_break: Optional[bool] = None,
) -> CommitOutcome:
    """Commit the winning activity of a block."""
    trip = get_trip(db, trip_id)
    get_block_in_trip(db, trip_id, block_id)
    organizer = require_organizer(db, trip_id, member_id)

    if find_commit(db, block_id):
        raise AlreadyCommitted("Block is already committed", block_id=block_id)

    tally = get_tally(db, trip_id, block_id)
    if strict_tie_break is None:
        strict_tie_break = settings.STRICT_TIE_BREAK

    if manual_activity_id:
        get_activity_in_trip(db, trip_id, manual_activity_id)
        if strict_tie_break:
            leaders = {e.activity_id for e in tally.entries if e.vote_count == tally.top_count}
            if manual_activity_id not in leaders:
                raise InvalidTieBreak(
                    "Selected activity is not among the top-voted activities",
                    activity_id=manual_activity_id,
                )
        winner_id = manual_activity_id
    else:
        if not tally.entries:
            raise NoVotes("No votes found for this block", block_id=block_id)
        if tally.is_tie:
            logger.info("Tie detected in block %s between %d activities", block_id, len(tally.tied))
            return CommitOutcome(
                success=False,
                reason=TIE_DETECTED,
                message="Multiple activities tied for most votes. Choose one to break the tie.",
                tally=tally,
                duplicate_policy=trip.duplicate_policy,
                tied_activities=tally.tied,
            )
        winner_id = tally.entries[0].activity_id

    policy = trip.duplicate_policy
    if policy != DuplicatePolicy.allow:
        locations = _existing_locations(db, trip_id, winner_id)
        if locations:
            if policy == DuplicatePolicy.prevent:
                raise DuplicateForbidden(
                    "Activity is already scheduled in another block",
                    activity_id=winner_id,
                    existing_locations=locations,
                )
            if not confirm_duplicate:
                logger.info("Duplicate warning for activity %s in block %s", winner_id, block_id)
                return CommitOutcome(
                    success=False,
                    reason=DUPLICATE_WARNING,
                    message="Activity is already scheduled in another block. Confirm to schedule it again.",
                    tally=tally,
                    duplicate_policy=policy,
                    existing_locations=locations,
                )

    commit = Commit(
        trip_id=trip_id,
        block_id=block_id,
        activity_id=winner_id,
        committed_by=organizer.id,
        committed_at=clock(),
    )
    db.add(commit)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if find_commit(db, block_id):
            raise AlreadyCommitted("Block is already committed", block_id=block_id) from None
        raise
    db.refresh(commit)
    logger.info("Committed activity %s to block %s by organizer %s", winner_id, block_id, organizer.id)

    removed = 0
    if policy == DuplicatePolicy.soft_block:
        removed = _remove_superseded_proposals(db, trip_id, block_id, winner_id)

    return CommitOutcome(
        success=True,
        commit=commit,
        tally=tally,
        duplicate_policy=policy,
        removed_proposals=removed,
    )


@storage_bound
def uncommit_block(db: Session, trip_id: str, block_id: str, member_id: str) -> None:
    """Return a committed block to ``Open``.

    Proposals removed by an earlier soft-block cleanup are not restored.
    """
    get_trip(db, trip_id)
    get_block_in_trip(db, trip_id, block_id)
    require_organizer(db, trip_id, member_id)

    commit = find_commit(db, block_id)
    if not commit:
        raise NotCommitted("Block is not committed", block_id=block_id)
    activity_id = commit.activity_id
    db.delete(commit)
    db.commit()
    logger.info("Uncommitted activity %s from block %s", activity_id, block_id)


@storage_bound
def get_commit(db: Session, trip_id: str, block_id: str) -> Optional[Commit]:
    get_block_in_trip(db, trip_id, block_id)
    return (
        db.query(Commit)
        .options(joinedload(Commit.activity))
        .filter(Commit.block_id == block_id)
        .first()
    )


@storage_bound
def list_commits(db: Session, trip_id: str) -> list[Commit]:
    get_trip(db, trip_id)
    return (
        db.query(Commit)
        .options(joinedload(Commit.activity))
        .filter(Commit.trip_id == trip_id)
        .order_by(Commit.committed_at.desc())
        .all()
    )
