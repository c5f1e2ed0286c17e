from datetime import datetime
from typing import Optional

from pydantic import Field

from hotel_ops.models.rooms import RoomStatus
from hotel_ops.schemas.base import CamelModel


class RoomCreatePayload(CamelModel):
    room_number: str = Field(..., min_length=1, description="Human-facing room number")
    type: str = Field(..., min_length=1, description="Room type, e.g. Single or Suite")
    rate: float = Field(0.0, ge=0, description="Nightly rate")
    status: RoomStatus = Field(RoomStatus.AVAILABLE, description="Initial status")


class RoomUpdatePayload(CamelModel):
    """Schema for editing a room. All fields are optional."""

    room_number: Optional[str] = Field(None, min_length=1)
    type: Optional[str] = Field(None, min_length=1)
    rate: Optional[float] = Field(None, ge=0)
    status: Optional[RoomStatus] = None


class RoomStatusPayload(CamelModel):
    status: RoomStatus


class RoomResponse(CamelModel):
    id: str
    room_number: str
    type: str
    rate: float
    status: RoomStatus
    created_at: datetime
    updated_at: datetime


class RoomStatusRepair(CamelModel):
    room_id: str
    room_number: str
    from_status: str
    to_status: str
