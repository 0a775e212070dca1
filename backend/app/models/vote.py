"""Vote ORM model: the vote ledger."""
import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from app.database import Base


class Vote(Base):
    __tablename__ = "votes"
    __table_args__ = (
        UniqueConstraint("block_id", "activity_id", "member_id", name="uq_votes_block_activity_member"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    trip_id = Column(String(36), ForeignKey("trips.id"), nullable=False)
    block_id = Column(String(36), ForeignKey("blocks.id"), nullable=False, index=True)
    activity_id = Column(String(36), ForeignKey("activities.id"), nullable=False)
    member_id = Column(String(36), ForeignKey("trip_members.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
