"""SQLAlchemy model for room bookings."""

import enum
import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, String

from hotel_ops.models.base import Base
from hotel_ops.utils.datetime import utc_now


class BookingStatus(str, enum.Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CHECKED_IN = "CheckedIn"
    CHECKED_OUT = "CheckedOut"
    CANCELLED = "Cancelled"


# Statuses that hold the room for their [check_in, check_out) interval
ACTIVE_STATUSES: tuple[str, ...] = (
    BookingStatus.PENDING.value,
    BookingStatus.CONFIRMED.value,
    BookingStatus.CHECKED_IN.value,
)

LOCAL_SOURCE = "Local"


class Booking(Base):
    """
    ORM model for a reservation of one room over a half-open time interval.

    The PostgreSQL migration adds an exclusion constraint so that two active
    bookings for the same room can never overlap, even across processes.
    """

    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("check_in < check_out", name="ck_bookings_check_in_before_check_out"),
        Index("ix_bookings_room_interval", "room_id", "check_in", "check_out"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    room_id = Column(
        String(36), ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True
    )
    guest_id = Column(
        String(36), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    check_in = Column(DateTime(timezone=True), nullable=False)
    check_out = Column(DateTime(timezone=True), nullable=False)
    status = Column(String(32), nullable=False, default=BookingStatus.CONFIRMED.value)
    source = Column(String(64), nullable=False, default=LOCAL_SOURCE)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)
