"""SQLAlchemy model for physical rooms."""

import enum
import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, Float, String

from hotel_ops.models.base import Base
from hotel_ops.utils.datetime import utc_now


class RoomStatus(str, enum.Enum):
    AVAILABLE = "Available"
    OCCUPIED = "Occupied"
    CLEANING = "Cleaning"
    MAINTENANCE = "Maintenance"


class Room(Base):
    """
    ORM model for a bookable room.

    ``status`` is display state; check-in and check-out overwrite it.
    """

    __tablename__ = "rooms"
    __table_args__ = (CheckConstraint("rate >= 0", name="ck_rooms_rate_non_negative"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    room_number = Column(String(32), nullable=False, unique=True, index=True)
    type = Column(String(64), nullable=False)
    rate = Column(Float, nullable=False, default=0.0)
    status = Column(String(32), nullable=False, default=RoomStatus.AVAILABLE.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)
