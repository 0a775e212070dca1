"""Commit ORM model: at most one row per block."""
import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base


class Commit(Base):
    __tablename__ = "commits"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    trip_id = Column(String(36), ForeignKey("trips.id"), nullable=False, index=True)
    # NULL only while a swap has parked this row between steps
    block_id = Column(String(36), ForeignKey("blocks.id"), nullable=True, unique=True)
    activity_id = Column(String(36), ForeignKey("activities.id"), nullable=False)
    committed_by = Column(String(36), ForeignKey("trip_members.id"), nullable=False)
    committed_at = Column(DateTime(timezone=True), nullable=False)

    activity = relationship("Activity")
