"""Tally engine: ranks a block's proposals by vote count.

``tally_votes`` is pure: it never touches storage and its ordering depends
only on the order the votes are handed in. Equal counts keep that order
(stable sort, no secondary key), which is why a tie must be resolved by the
organizer rather than by position in the list.
"""
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from sqlalchemy.orm import Session

from app.models.activity import Activity
from app.models.vote import Vote
from app.services.access import get_block_in_trip
from app.services.errors import storage_bound


@dataclass
class TallyEntry:
    activity_id: str
    activity_title: str
    vote_count: int


@dataclass
class Tally:
    block_id: Optional[str]
    entries: list[TallyEntry] = field(default_factory=list)
    total_votes: int = 0
    unique_voters: int = 0

    @property
    def top_count(self) -> int:
        return self.entries[0].vote_count if self.entries else 0

    @property
    def tied(self) -> list[TallyEntry]:
        """Activities sharing the top count, when two or more do."""
        if self.top_count == 0:
            return []
        leaders = [e for e in self.entries if e.vote_count == self.top_count]
        return leaders if len(leaders) > 1 else []

    @property
    def is_tie(self) -> bool:
        return bool(self.tied)

    @property
    def winner(self) -> Optional[TallyEntry]:
        if not self.entries or self.is_tie:
            return None
        return self.entries[0]


def tally_votes(
    votes: Iterable[Vote],
    titles: Optional[Mapping[str, str]] = None,
    block_id: Optional[str] = None,
) -> Tally:
    titles = titles or {}
    counts: dict[str, int] = {}
    voters: set[str] = set()
    total = 0
    for vote in votes:
        counts[vote.activity_id] = counts.get(vote.activity_id, 0) + 1
        voters.add(vote.member_id)
        total += 1

    entries = [
        TallyEntry(activity_id=aid, activity_title=titles.get(aid, "Unknown"), vote_count=n)
        for aid, n in counts.items()
    ]
    entries.sort(key=lambda e: e.vote_count, reverse=True)
    return Tally(block_id=block_id, entries=entries, total_votes=total, unique_voters=len(voters))


@storage_bound
def get_tally(db: Session, trip_id: str, block_id: str) -> Tally:
    """Read the block's votes and tally them. Read-only."""
    get_block_in_trip(db, trip_id, block_id)
    votes = db.query(Vote).filter(Vote.block_id == block_id).all()
    activity_ids = {v.activity_id for v in votes}
    titles = {}
    if activity_ids:
        rows = db.query(Activity.id, Activity.title).filter(Activity.id.in_(list(activity_ids))).all()
        titles = {aid: title for aid, title in rows}
    return tally_votes(votes, titles, block_id=block_id)
