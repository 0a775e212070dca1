"""Day and Block ORM models."""
import uuid
from sqlalchemy import Column, String, Date, DateTime, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.database import Base


class Day(Base):
    __tablename__ = "days"
    __table_args__ = (UniqueConstraint("trip_id", "date", name="uq_days_trip_date"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    trip_id = Column(String(36), ForeignKey("trips.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)

    trip = relationship("Trip", back_populates="days")
    blocks = relationship("Block", back_populates="day", cascade="all, delete-orphan", order_by="Block.position")


class Block(Base):
    __tablename__ = "blocks"
    __table_args__ = (UniqueConstraint("day_id", "label", name="uq_blocks_day_label"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    day_id = Column(String(36), ForeignKey("days.id"), nullable=False, index=True)
    label = Column(String(100), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    vote_open_ts = Column(DateTime(timezone=True), nullable=True)
    vote_close_ts = Column(DateTime(timezone=True), nullable=True)

    day = relationship("Day", back_populates="blocks")
