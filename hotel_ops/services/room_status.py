"""
Reconciliation of room statuses with the bookings that govern them.

Check-in and check-out write the booking and the room in one transaction, but
staff edits and rows touched outside the API can still leave a room showing
the wrong state. This sweep derives the expected status from the bookings.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from sqlalchemy.engine import Engine

from hotel_ops.db.readers.bookings import checked_in_room_ids
from hotel_ops.db.readers.rooms import list_rooms
from hotel_ops.db.writers.rooms import set_room_status
from hotel_ops.metrics import room_status_repairs
from hotel_ops.models.rooms import RoomStatus

logger = structlog.get_logger(__name__)


def expected_room_status(current: str, has_checked_in_guest: bool) -> Optional[RoomStatus]:
    """
    Status a room should be repaired to, or None if it is consistent.

    Rooms put into Maintenance by staff are left alone.
    """
    if has_checked_in_guest:
        if current in (RoomStatus.OCCUPIED.value, RoomStatus.MAINTENANCE.value):
            return None
        return RoomStatus.OCCUPIED
    if current == RoomStatus.OCCUPIED.value:
        # Nobody is checked in any more; housekeeping comes first
        return RoomStatus.CLEANING
    return None


def reconcile_room_statuses(engine: Engine) -> list[dict[str, Any]]:
    """
    Repair every room whose status disagrees with its bookings.

    Returns:
        list[dict]: One entry per repaired room with room_id, room_number,
            from_status and to_status
    """
    repairs: list[dict[str, Any]] = []

    with engine.begin() as conn:
        occupied = checked_in_room_ids(conn)
        for room in list_rooms(conn):
            target = expected_room_status(room["status"], room["id"] in occupied)
            if target is None:
                continue

            set_room_status(conn, room["id"], target.value)
            room_status_repairs.labels(status=target.value).inc()
            logger.warning(
                "room_status_repaired",
                room_id=room["id"],
                room_number=room["room_number"],
                from_status=room["status"],
                to_status=target.value,
            )
            repairs.append(
                {
                    "room_id": room["id"],
                    "room_number": room["room_number"],
                    "from_status": room["status"],
                    "to_status": target.value,
                }
            )

    logger.info("room_status_reconciled", repaired=len(repairs))
    return repairs
