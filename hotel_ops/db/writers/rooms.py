import logging
import uuid
from typing import Any, Optional

from sqlalchemy import delete, insert, update
from sqlalchemy.engine import Connection

from hotel_ops.db.readers.rooms import get_room
from hotel_ops.models.rooms import Room, RoomStatus
from hotel_ops.utils.datetime import utc_now

logger = logging.getLogger(__name__)


def insert_room(conn: Connection, data: dict[str, Any]) -> dict[str, Any]:
    """
    Insert a room.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        data (dict): room_number, type, rate and optional status.

    Returns:
        dict[str, Any]: The stored row.
    """
    now = utc_now()
    row = {
        "id": str(uuid.uuid4()),
        "room_number": data["room_number"],
        "type": data["type"],
        "rate": data.get("rate", 0.0),
        "status": data.get("status") or RoomStatus.AVAILABLE.value,
        "created_at": now,
        "updated_at": now,
    }
    conn.execute(insert(Room).values(**row))
    logger.info("Inserted room id=%s number=%s", row["id"], row["room_number"])
    return row


def update_room(conn: Connection, room_id: str, data: dict[str, Any]) -> Optional[dict[str, Any]]:
    """
    Update room fields.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        room_id (str): Room id.
        data (dict): Fields to update.

    Returns:
        Optional[dict[str, Any]]: Updated row, or None if the room does not exist.
    """
    values = dict(data)
    values["updated_at"] = utc_now()

    result = conn.execute(update(Room).where(Room.id == room_id).values(**values))
    if result.rowcount == 0:
        return None
    return get_room(conn, room_id)


def set_room_status(conn: Connection, room_id: str, status: str) -> Optional[dict[str, Any]]:
    """
    Overwrite the status of a room.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        room_id (str): Room id.
        status (str): New RoomStatus value.

    Returns:
        Optional[dict[str, Any]]: Updated row, or None if the room does not exist.
    """
    room = update_room(conn, room_id, {"status": status})
    if room is not None:
        logger.info("Room id=%s status set to %s", room_id, status)
    return room


def delete_room(conn: Connection, room_id: str) -> bool:
    result = conn.execute(delete(Room).where(Room.id == room_id))
    return result.rowcount > 0
