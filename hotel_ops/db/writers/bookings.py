import logging
import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import insert, update
from sqlalchemy.engine import Connection

from hotel_ops.db.readers.bookings import get_booking
from hotel_ops.models.bookings import LOCAL_SOURCE, Booking, BookingStatus
from hotel_ops.utils.datetime import utc_now

logger = logging.getLogger(__name__)


def insert_booking(
    conn: Connection,
    room_id: str,
    guest_id: str,
    check_in: datetime,
    check_out: datetime,
    status: str = BookingStatus.CONFIRMED.value,
    source: str = LOCAL_SOURCE,
) -> dict[str, Any]:
    """
    Insert a booking row.

    Callers are responsible for the overlap check; on PostgreSQL the exclusion
    constraint still rejects an overlapping active booking with IntegrityError.

    Args:
        conn (Connection): SQLAlchemy DB connection (inside the creating transaction).
        room_id (str): Booked room.
        guest_id (str): Local account id of the guest.
        check_in (datetime): Start of the stay (inclusive).
        check_out (datetime): End of the stay (exclusive).
        status (str): Initial status.
        source (str): Channel the booking came from.

    Returns:
        dict[str, Any]: The stored row.
    """
    now = utc_now()
    row = {
        "id": str(uuid.uuid4()),
        "room_id": room_id,
        "guest_id": guest_id,
        "check_in": check_in,
        "check_out": check_out,
        "status": status,
        "source": source,
        "created_at": now,
        "updated_at": now,
    }
    conn.execute(insert(Booking).values(**row))
    logger.info("Inserted booking id=%s room_id=%s", row["id"], room_id)
    return row


def update_booking_status(
    conn: Connection, booking_id: str, status: str
) -> Optional[dict[str, Any]]:
    """
    Set the lifecycle status of a booking.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        booking_id (str): Booking id.
        status (str): New BookingStatus value.

    Returns:
        Optional[dict[str, Any]]: Updated row, or None if the booking does not exist.
    """
    result = conn.execute(
        update(Booking)
        .where(Booking.id == booking_id)
        .values(status=status, updated_at=utc_now())
    )
    if result.rowcount == 0:
        return None
    return get_booking(conn, booking_id)
