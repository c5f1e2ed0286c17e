from datetime import datetime
from typing import Any, Optional

from sqlalchemy import Select, select
from sqlalchemy.engine import Connection

from hotel_ops.db._rows import row_to_dict
from hotel_ops.models.accounts import Account
from hotel_ops.models.bookings import ACTIVE_STATUSES, Booking, BookingStatus
from hotel_ops.models.rooms import Room

bookings = Booking.__table__
rooms = Room.__table__
accounts = Account.__table__


def find_overlapping_booking(
    conn: Connection,
    room_id: str,
    check_in: datetime,
    check_out: datetime,
) -> Optional[dict[str, Any]]:
    """
    Find an active booking of the room that intersects [check_in, check_out).

    Half-open intervals [a, b) and [c, d) overlap iff a < d and c < b, so a stay
    ending at the instant the next one starts does not count.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        room_id (str): Room to check.
        check_in (datetime): Requested start (inclusive).
        check_out (datetime): Requested end (exclusive).

    Returns:
        Optional[dict[str, Any]]: One conflicting booking, or None if the room is free.
    """
    stmt = (
        select(bookings)
        .where(bookings.c.room_id == room_id)
        .where(bookings.c.status.in_(ACTIVE_STATUSES))
        .where(bookings.c.check_in < check_out)
        .where(bookings.c.check_out > check_in)
        .limit(1)
    )
    row = conn.execute(stmt).mappings().fetchone()
    return row_to_dict(row) if row else None


def get_booking(
    conn: Connection, booking_id: str, for_update: bool = False
) -> Optional[dict[str, Any]]:
    stmt = select(bookings).where(bookings.c.id == booking_id)
    if for_update:
        stmt = stmt.with_for_update()
    row = conn.execute(stmt).mappings().fetchone()
    return row_to_dict(row) if row else None


def _detailed_bookings_query() -> Select[Any]:
    return (
        select(
            bookings,
            rooms.c.room_number.label("room_room_number"),
            rooms.c.type.label("room_type"),
            rooms.c.rate.label("room_rate"),
            rooms.c.status.label("room_status"),
            accounts.c.name.label("guest_name"),
            accounts.c.email.label("guest_email"),
            accounts.c.phone.label("guest_phone"),
        )
        .select_from(
            bookings.outerjoin(rooms, rooms.c.id == bookings.c.room_id).outerjoin(
                accounts, accounts.c.id == bookings.c.guest_id
            )
        )
        .order_by(bookings.c.created_at.desc(), bookings.c.id)
    )


def _nest_details(row: dict[str, Any]) -> dict[str, Any]:
    room_number = row.pop("room_room_number")
    room = {
        "id": row["room_id"],
        "room_number": room_number,
        "type": row.pop("room_type"),
        "rate": row.pop("room_rate"),
        "status": row.pop("room_status"),
    }
    guest_name = row.pop("guest_name")
    guest = {
        "id": row["guest_id"],
        "name": guest_name,
        "email": row.pop("guest_email"),
        "phone": row.pop("guest_phone"),
    }
    row["room"] = room if room_number is not None else None
    row["guest"] = guest if guest_name is not None else None
    return row


def list_all_bookings(conn: Connection) -> list[dict[str, Any]]:
    """
    List every booking with room and guest summaries, newest first.

    Args:
        conn (Connection): An active SQLAlchemy database connection.

    Returns:
        list[dict[str, Any]]: Booking rows with nested "room" and "guest" dicts.
    """
    result = conn.execute(_detailed_bookings_query())
    return [_nest_details(row_to_dict(row)) for row in result.mappings()]


def list_guest_bookings(conn: Connection, guest_id: str) -> list[dict[str, Any]]:
    """
    List the bookings of one guest with room and guest summaries, newest first.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        guest_id (str): Local account id of the guest.

    Returns:
        list[dict[str, Any]]: Booking rows with nested "room" and "guest" dicts.
    """
    stmt = _detailed_bookings_query().where(bookings.c.guest_id == guest_id)
    result = conn.execute(stmt)
    return [_nest_details(row_to_dict(row)) for row in result.mappings()]


def has_active_bookings(
    conn: Connection,
    room_id: Optional[str] = None,
    guest_id: Optional[str] = None,
) -> bool:
    """Whether a room or a guest still holds bookings in an active status."""
    stmt = select(bookings.c.id).where(bookings.c.status.in_(ACTIVE_STATUSES))
    if room_id is not None:
        stmt = stmt.where(bookings.c.room_id == room_id)
    if guest_id is not None:
        stmt = stmt.where(bookings.c.guest_id == guest_id)
    return conn.execute(stmt.limit(1)).fetchone() is not None


def checked_in_room_ids(conn: Connection) -> set[str]:
    """Ids of rooms that currently have a checked-in guest."""
    result = conn.execute(
        select(bookings.c.room_id)
        .where(bookings.c.status == BookingStatus.CHECKED_IN.value)
        .distinct()
    )
    return {row[0] for row in result}
