from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection

from hotel_ops.db._rows import row_to_dict
from hotel_ops.models.rooms import Room

rooms = Room.__table__


def list_rooms(
    conn: Connection,
    status: Optional[str] = None,
    room_type: Optional[str] = None,
    min_rate: Optional[float] = None,
    max_rate: Optional[float] = None,
) -> list[dict[str, Any]]:
    """
    List rooms ordered by room number, applying every given filter.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        status (Optional[str]): Exact room status.
        room_type (Optional[str]): Exact room type.
        min_rate (Optional[float]): Inclusive lower bound on the nightly rate.
        max_rate (Optional[float]): Inclusive upper bound on the nightly rate.

    Returns:
        list[dict[str, Any]]: Matching room rows.
    """
    stmt = select(rooms)
    if status is not None:
        stmt = stmt.where(rooms.c.status == status)
    if room_type is not None:
        stmt = stmt.where(rooms.c.type == room_type)
    if min_rate is not None:
        stmt = stmt.where(rooms.c.rate >= min_rate)
    if max_rate is not None:
        stmt = stmt.where(rooms.c.rate <= max_rate)

    result = conn.execute(stmt.order_by(rooms.c.room_number))
    return [row_to_dict(row) for row in result.mappings()]


def get_room(conn: Connection, room_id: str, for_update: bool = False) -> Optional[dict[str, Any]]:
    """
    Fetch one room.

    With ``for_update`` the row stays locked until the surrounding transaction
    ends (PostgreSQL); booking creation uses this to serialize writers per room.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        room_id (str): Room id.
        for_update (bool): Lock the row for the rest of the transaction.

    Returns:
        Optional[dict[str, Any]]: Room row or None.
    """
    stmt = select(rooms).where(rooms.c.id == room_id)
    if for_update:
        stmt = stmt.with_for_update()
    row = conn.execute(stmt).mappings().fetchone()
    return row_to_dict(row) if row else None


def room_number_taken(conn: Connection, room_number: str, exclude_id: Optional[str] = None) -> bool:
    stmt = select(rooms.c.id).where(rooms.c.room_number == room_number)
    if exclude_id is not None:
        stmt = stmt.where(rooms.c.id != exclude_id)
    return conn.execute(stmt).fetchone() is not None
