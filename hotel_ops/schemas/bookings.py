from datetime import datetime
from typing import Optional

from pydantic import Field

from hotel_ops.models.bookings import BookingStatus
from hotel_ops.models.rooms import RoomStatus
from hotel_ops.schemas.base import CamelModel


class BookingCreatePayload(CamelModel):
    """
    Schema for creating a booking.

    Dates are kept as strings so unparseable values surface as an invalid date
    range rather than a generic body error.
    """

    room_id: str = Field(..., description="Room to book")
    check_in: str = Field(..., description="Start of the stay (ISO-8601, inclusive)")
    check_out: str = Field(..., description="End of the stay (ISO-8601, exclusive)")
    guest_id: Optional[str] = Field(
        None, description="Guest to book for (honoured for staff only)"
    )


class BookingRoomSummary(CamelModel):
    id: str
    room_number: str
    type: str
    rate: float
    status: RoomStatus


class BookingGuestSummary(CamelModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None


class BookingResponse(CamelModel):
    id: str
    room_id: str
    guest_id: str
    check_in: datetime
    check_out: datetime
    status: BookingStatus
    source: str
    created_at: datetime
    updated_at: datetime
    room: Optional[BookingRoomSummary] = None
    guest: Optional[BookingGuestSummary] = None
