"""Activity ORM model: trip-scoped, proposable into any block of the trip."""
import uuid
from sqlalchemy import Column, String, DateTime, Integer, Numeric, Text, JSON, ForeignKey
from sqlalchemy.sql import func
from app.database import Base


class Activity(Base):
    __tablename__ = "activities"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    trip_id = Column(String(36), ForeignKey("trips.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    category = Column(String(50), nullable=True)
    cost_amount = Column(Numeric(10, 2), nullable=True)
    cost_currency = Column(String(3), nullable=True)
    duration_min = Column(Integer, nullable=True)
    location = Column(JSON, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
