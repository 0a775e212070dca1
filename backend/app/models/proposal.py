"""BlockProposal ORM model: an activity nominated for a block."""
import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from app.database import Base


class BlockProposal(Base):
    __tablename__ = "block_proposals"
    __table_args__ = (UniqueConstraint("block_id", "activity_id", name="uq_block_proposals_block_activity"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    trip_id = Column(String(36), ForeignKey("trips.id"), nullable=False, index=True)
    block_id = Column(String(36), ForeignKey("blocks.id"), nullable=False)
    activity_id = Column(String(36), ForeignKey("activities.id"), nullable=False)
    created_by = Column(String(36), ForeignKey("trip_members.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
