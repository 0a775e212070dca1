"""Trip and TripMember ORM models."""
import uuid
import enum
from sqlalchemy import Column, String, Date, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base


class DuplicatePolicy(str, enum.Enum):
    soft_block = "soft_block"
    prevent = "prevent"
    allow = "allow"


class MemberRole(str, enum.Enum):
    organizer = "organizer"
    collaborator = "collaborator"


class Trip(Base):
    __tablename__ = "trips"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(200), nullable=False)
    destination = Column(String(255), nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    timezone = Column(String(50), nullable=False, default="UTC")  # IANA tz
    currency = Column(String(3), nullable=False, default="USD")
    duplicate_policy = Column(SAEnum(DuplicatePolicy), nullable=False, default=DuplicatePolicy.soft_block)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    members = relationship("TripMember", back_populates="trip", cascade="all, delete-orphan")
    days = relationship("Day", back_populates="trip", cascade="all, delete-orphan", order_by="Day.date")


class TripMember(Base):
    __tablename__ = "trip_members"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    trip_id = Column(String(36), ForeignKey("trips.id"), nullable=False, index=True)
    role = Column(SAEnum(MemberRole), nullable=False, default=MemberRole.collaborator)
    display_name = Column(String(100), nullable=False)
    user_id = Column(String(36), nullable=True)  # opaque identity reference
    joined_at = Column(DateTime(timezone=True), server_default=func.now())

    trip = relationship("Trip", back_populates="members")
