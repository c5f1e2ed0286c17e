from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.engine import Engine

from hotel_ops.auth.principal import Principal, Role
from hotel_ops.dependencies import get_db_engine, get_principal, require_roles
from hotel_ops.errors import HotelOpsError
from hotel_ops.schemas.bookings import BookingCreatePayload, BookingResponse
from hotel_ops.services.bookings import (
    BookingRequest,
    cancel_booking,
    check_in_booking,
    check_out_booking,
    create_booking,
    list_bookings,
)

logger = structlog.get_logger(__name__)
router = APIRouter()

staff_only = require_roles(Role.ADMIN, Role.RECEPTIONIST)


@router.get("", response_model=list[BookingResponse])
def get_bookings(
    principal: Principal = Depends(get_principal),
    db_engine: Engine = Depends(get_db_engine),
) -> list[dict[str, Any]]:
    """
    List bookings visible to the caller, newest first.

    Admins and receptionists see every booking; everybody else sees their own.
    Query parameters are ignored on purpose: the filter comes from the caller's
    identity only.

    Returns:
        list: Bookings with room and guest summaries
    """
    return list_bookings(db_engine, principal)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=BookingResponse)
def create_booking_endpoint(
    payload: BookingCreatePayload,
    principal: Principal = Depends(
        require_roles(Role.ADMIN, Role.RECEPTIONIST, Role.CUSTOMER)
    ),
    db_engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Reserve a room.

    Args:
        payload: roomId, checkIn, checkOut and optional guestId
        principal: Caller (admin, receptionist or customer)
        db_engine: Database engine

    Returns:
        dict: Created booking (status Confirmed, source Local)
    """
    try:
        return create_booking(
            db_engine,
            principal,
            BookingRequest(
                room_id=payload.room_id,
                check_in=payload.check_in,
                check_out=payload.check_out,
                guest_id=payload.guest_id,
            ),
        )
    except HotelOpsError:
        raise
    except Exception as e:
        logger.exception("booking_creation_failed", room_id=payload.room_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to create booking")


@router.post("/{booking_id}/checkin", response_model=BookingResponse)
def check_in_endpoint(
    booking_id: str,
    principal: Principal = Depends(staff_only),
    db_engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """Check a guest in: booking becomes CheckedIn, room becomes Occupied."""
    try:
        return check_in_booking(db_engine, principal, booking_id)
    except HotelOpsError:
        raise
    except Exception as e:
        logger.exception("check_in_failed", booking_id=booking_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to check in")


@router.post("/{booking_id}/checkout", response_model=BookingResponse)
def check_out_endpoint(
    booking_id: str,
    principal: Principal = Depends(staff_only),
    db_engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """Check a guest out: booking becomes CheckedOut, room goes to Cleaning."""
    try:
        return check_out_booking(db_engine, principal, booking_id)
    except HotelOpsError:
        raise
    except Exception as e:
        logger.exception("check_out_failed", booking_id=booking_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to check out")


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
def cancel_endpoint(
    booking_id: str,
    principal: Principal = Depends(get_principal),
    db_engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """Cancel a Pending or Confirmed booking (own booking, or any booking for staff)."""
    return cancel_booking(db_engine, principal, booking_id)


@router.post("/webhooks/ota")
def receive_ota_webhook(principal: Principal = Depends(get_principal)) -> dict[str, bool]:
    """
    Placeholder receiver for OTA channel notifications.

    Requires a bearer credential like every booking route. Channel
    synchronisation is not implemented; the event is acknowledged and dropped.
    """
    logger.info("ota_webhook_ignored", caller=principal.external_id)
    return {"ok": True}
