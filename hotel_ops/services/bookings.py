"""
Booking allocation: overlap-checked creation, ownership-filtered listing and
the check-in / check-out / cancel lifecycle.

Lifecycle:

    Pending --(reserve passes overlap check)--> Confirmed
    Confirmed --(staff check-in)--> CheckedIn --(staff check-out)--> CheckedOut
    {Pending, Confirmed} --(cancel)--> Cancelled

Only Pending, Confirmed and CheckedIn bookings hold their room.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

import structlog
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError

from hotel_ops.auth.principal import Principal
from hotel_ops.db.readers.accounts import get_account
from hotel_ops.db.readers.bookings import (
    find_overlapping_booking,
    get_booking,
    list_all_bookings,
    list_guest_bookings,
)
from hotel_ops.db.readers.rooms import get_room
from hotel_ops.db.writers.bookings import insert_booking, update_booking_status
from hotel_ops.db.writers.rooms import set_room_status
from hotel_ops.errors import (
    BookingNotFound,
    Forbidden,
    InvalidDateRange,
    InvalidTransition,
    NotFound,
    ProfileMissing,
    RoomNotFound,
    RoomUnavailable,
)
from hotel_ops.metrics import (
    booking_conflicts,
    booking_create_duration,
    booking_transitions,
    bookings_created,
)
from hotel_ops.models.bookings import BookingStatus
from hotel_ops.models.rooms import RoomStatus
from hotel_ops.services.room_locks import RoomLockRegistry, room_locks
from hotel_ops.utils.datetime import parse_instant

logger = structlog.get_logger(__name__)

# Name of the PostgreSQL exclusion constraint created by the initial migration
OVERLAP_CONSTRAINT = "ex_bookings_room_no_overlap"

ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.CHECKED_IN: frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED}),
    BookingStatus.CHECKED_OUT: frozenset({BookingStatus.CHECKED_IN}),
    BookingStatus.CANCELLED: frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED}),
}

ROOM_STATUS_AFTER: dict[BookingStatus, RoomStatus] = {
    BookingStatus.CHECKED_IN: RoomStatus.OCCUPIED,
    BookingStatus.CHECKED_OUT: RoomStatus.CLEANING,
}

TRANSITION_NAMES: dict[BookingStatus, str] = {
    BookingStatus.CHECKED_IN: "check_in",
    BookingStatus.CHECKED_OUT: "check_out",
    BookingStatus.CANCELLED: "cancel",
}


@dataclass(frozen=True)
class BookingRequest:
    room_id: str
    check_in: Any
    check_out: Any
    guest_id: Optional[str] = None


def intervals_overlap(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    """Half-open overlap test: [a_start, a_end) and [b_start, b_end) share an instant."""
    return a_start < b_end and b_start < a_end


def parse_stay(check_in: Any, check_out: Any) -> tuple[datetime, datetime]:
    """
    Parse and validate the requested stay.

    Raises:
        InvalidDateRange: If either endpoint does not parse, or check-out is
            not strictly after check-in
    """
    start = parse_instant(check_in)
    end = parse_instant(check_out)
    if start is None or end is None:
        raise InvalidDateRange("Invalid dates")
    if start >= end:
        raise InvalidDateRange("Check-out must be after check-in")
    return start, end


def can_transition(current: str, target: BookingStatus) -> bool:
    try:
        status = BookingStatus(current)
    except ValueError:
        return False
    return status in ALLOWED_TRANSITIONS.get(target, frozenset())


def resolve_guest_id(principal: Principal, explicit_guest_id: Optional[str]) -> str:
    """
    Pick the account the booking is made for.

    Staff may book on behalf of a guest; anybody else always books for
    themselves, whatever guest id they send.

    Raises:
        ProfileMissing: If no guest can be determined
    """
    if explicit_guest_id and principal.is_staff:
        return explicit_guest_id
    if principal.local_id:
        return principal.local_id
    raise ProfileMissing()


def list_bookings(engine: Engine, principal: Principal) -> list[dict[str, Any]]:
    """
    List the bookings visible to a principal, newest first.

    Staff see every booking. Everybody else sees only bookings made for their
    own local account; without a local account that is nothing at all.
    """
    if principal.is_staff:
        with engine.connect() as conn:
            return list_all_bookings(conn)

    if not principal.local_id:
        return []

    with engine.connect() as conn:
        return list_guest_bookings(conn, principal.local_id)


def _is_overlap_violation(error: IntegrityError) -> bool:
    return OVERLAP_CONSTRAINT in str(error.orig)


def create_booking(
    engine: Engine,
    principal: Principal,
    request: BookingRequest,
    locks: RoomLockRegistry = room_locks,
) -> dict[str, Any]:
    """
    Reserve a room for a stay after checking it is free.

    Everything from the room lookup to the insert runs while holding the
    room's lock and inside a single transaction that also row-locks the room,
    so two overlapping requests for one room can never both succeed.

    Args:
        engine: Database engine
        principal: Resolved caller
        request: Room, stay endpoints and (staff only) the guest to book for
        locks: Per-room lock registry

    Returns:
        dict: The created booking row

    Raises:
        ProfileMissing: No guest could be determined
        NotFound: A staff-supplied guest id does not exist
        RoomNotFound: The room does not exist
        InvalidDateRange: Unparseable endpoints or check-out not after check-in
        RoomUnavailable: An active booking of the room overlaps the stay
    """
    guest_id = resolve_guest_id(principal, request.guest_id)

    # Locks are only registered for rooms that exist
    with engine.connect() as conn:
        if get_room(conn, request.room_id) is None:
            raise RoomNotFound()

    with booking_create_duration.time(), locks.hold(request.room_id):
        with engine.begin() as conn:
            if guest_id != principal.local_id and get_account(conn, guest_id) is None:
                raise NotFound("Guest not found")

            room = get_room(conn, request.room_id, for_update=True)
            if room is None:
                raise RoomNotFound()

            check_in, check_out = parse_stay(request.check_in, request.check_out)

            clash = find_overlapping_booking(conn, request.room_id, check_in, check_out)
            if clash is not None:
                booking_conflicts.inc()
                logger.info(
                    "booking_conflict",
                    room_id=request.room_id,
                    conflicting_booking_id=clash["id"],
                    check_in=check_in.isoformat(),
                    check_out=check_out.isoformat(),
                )
                raise RoomUnavailable()

            try:
                booking = insert_booking(conn, request.room_id, guest_id, check_in, check_out)
            except IntegrityError as e:
                if not _is_overlap_violation(e):
                    raise
                booking_conflicts.inc()
                logger.info("booking_conflict", room_id=request.room_id, detected_by="constraint")
                raise RoomUnavailable() from e

    bookings_created.labels(source=booking["source"]).inc()
    logger.info(
        "booking_created",
        booking_id=booking["id"],
        room_id=booking["room_id"],
        guest_id=guest_id,
        created_by=principal.external_id,
    )
    return booking


def _apply_transition(
    conn: Connection, booking: dict[str, Any], target: BookingStatus
) -> dict[str, Any]:
    if not can_transition(booking["status"], target):
        raise InvalidTransition(
            f"Cannot move booking from {booking['status']} to {target.value}"
        )

    updated = update_booking_status(conn, booking["id"], target.value)
    if updated is None:
        raise BookingNotFound()

    room_status = ROOM_STATUS_AFTER.get(target)
    if room_status is not None:
        set_room_status(conn, booking["room_id"], room_status.value)
    return updated


def transition_booking(
    engine: Engine, principal: Principal, booking_id: str, target: BookingStatus
) -> dict[str, Any]:
    """
    Move a booking to ``target`` and propagate the room status it implies.

    The booking update and the room update share one transaction.

    Raises:
        Forbidden: Check-in/check-out requested by a non-staff principal
        BookingNotFound: Unknown booking, or a non-staff caller's foreign booking
        InvalidTransition: The current status does not allow the move
    """
    if target in ROOM_STATUS_AFTER and not principal.is_staff:
        raise Forbidden()

    with engine.begin() as conn:
        booking = get_booking(conn, booking_id, for_update=True)
        if booking is None:
            raise BookingNotFound()
        # Customers only learn about their own bookings
        if not principal.is_staff and booking["guest_id"] != principal.local_id:
            raise BookingNotFound()

        updated = _apply_transition(conn, booking, target)

    booking_transitions.labels(transition=TRANSITION_NAMES[target]).inc()
    logger.info(
        "booking_transitioned",
        booking_id=booking_id,
        room_id=updated["room_id"],
        from_status=booking["status"],
        to_status=target.value,
        actor=principal.external_id,
    )
    return updated


def check_in_booking(engine: Engine, principal: Principal, booking_id: str) -> dict[str, Any]:
    return transition_booking(engine, principal, booking_id, BookingStatus.CHECKED_IN)


def check_out_booking(engine: Engine, principal: Principal, booking_id: str) -> dict[str, Any]:
    return transition_booking(engine, principal, booking_id, BookingStatus.CHECKED_OUT)


def cancel_booking(engine: Engine, principal: Principal, booking_id: str) -> dict[str, Any]:
    return transition_booking(engine, principal, booking_id, BookingStatus.CANCELLED)
