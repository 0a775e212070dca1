"""Swap the committed activities of two blocks.

The exchange runs as three guarded steps so that backends validating the
``commits.block_id`` unique constraint per statement never see two rows on
the same block:

1. park commit 1 on the placeholder (``NULL``)
2. move commit 2 into block 1
3. move commit 1 into block 2

Each step is flushed on its own inside the session transaction. If step 2 or
3 fails the transaction is rolled back and both original assignments are
verified, rewriting them if the rollback did not. If that restore also fails
the swap is reported as ``SwapCorrupted`` and needs manual repair.
"""
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.commit import Commit
from app.services.access import find_commit, get_block_in_trip, get_trip, require_organizer
from app.services.errors import (
    STORAGE_ERRORS,
    BothMustBeCommitted,
    InvalidSwap,
    StorageUnavailable,
    SwapCorrupted,
    SwapFailed,
    storage_bound,
)

logger = logging.getLogger(__name__)

SWAP_PLACEHOLDER = None


def _move_commit(db: Session, commit: Commit, block_id: Optional[str]) -> None:
    commit.block_id = block_id
    db.flush()


def _restore_assignments(db: Session, original: dict[str, str]) -> None:
    """Put each commit id back on its original block and make it durable."""
    db.rollback()
    rows = db.query(Commit).filter(Commit.id.in_(list(original))).all()
    if len(rows) != len(original):
        raise SwapCorrupted(
            "Commit rows went missing during swap rollback",
            original_assignments=original,
        )
    drifted = [c for c in rows if c.block_id != original[c.id]]
    if not drifted:
        return
    for commit in drifted:
        commit.block_id = SWAP_PLACEHOLDER
    db.flush()
    for commit in drifted:
        commit.block_id = original[commit.id]
    db.commit()


@storage_bound
def swap_commits(
    db: Session,
    trip_id: str,
    block_id_1: str,
    block_id_2: str,
    member_id: str,
) -> tuple[Commit, Commit]:
    """Exchange the commits of two blocks; return them as (block 1, block 2)."""
    get_trip(db, trip_id)
    if block_id_1 == block_id_2:
        raise InvalidSwap("Select two different blocks to swap", block_id=block_id_1)
    get_block_in_trip(db, trip_id, block_id_1)
    get_block_in_trip(db, trip_id, block_id_2)
    require_organizer(db, trip_id, member_id)

    first = find_commit(db, block_id_1)
    second = find_commit(db, block_id_2)
    if not first or not second:
        raise BothMustBeCommitted(
            "Both blocks must be committed to swap",
            block_ids=[b for b, c in ((block_id_1, first), (block_id_2, second)) if c is None],
        )

    original = {first.id: block_id_1, second.id: block_id_2}

    try:
        _move_commit(db, first, SWAP_PLACEHOLDER)
    except SQLAlchemyError:
        db.rollback()
        raise

    try:
        _move_commit(db, second, block_id_1)
        _move_commit(db, first, block_id_2)
        db.commit()
    except SQLAlchemyError as exc:
        logger.error("Swap of blocks %s and %s failed mid-sequence: %s", block_id_1, block_id_2, exc)
        try:
            _restore_assignments(db, original)
        except (SQLAlchemyError, SwapCorrupted) as restore_exc:
            logger.critical(
                "Swap rollback failed; commits %s need manual repair (original assignments: %s)",
                list(original),
                original,
            )
            raise SwapCorrupted(
                "Swap failed and original commits could not be restored; manual repair required",
                original_assignments=original,
            ) from restore_exc
        if isinstance(exc, STORAGE_ERRORS):
            raise StorageUnavailable("Storage is temporarily unavailable, retry later") from exc
        raise SwapFailed("Swap failed; original commits were restored", block_ids=[block_id_1, block_id_2]) from exc

    db.refresh(first)
    db.refresh(second)
    logger.info(
        "Swapped commits: block %s now holds activity %s, block %s now holds activity %s",
        block_id_1,
        second.activity_id,
        block_id_2,
        first.activity_id,
    )
    return second, first
