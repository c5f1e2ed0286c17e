from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from hotel_ops.auth.principal import Principal, Role
from hotel_ops.db.readers.bookings import has_active_bookings
from hotel_ops.db.readers.rooms import get_room, list_rooms, room_number_taken
from hotel_ops.db.writers.rooms import delete_room, insert_room, set_room_status, update_room
from hotel_ops.dependencies import get_db_engine, get_principal, require_roles
from hotel_ops.errors import Conflict, HotelOpsError, RoomNotFound
from hotel_ops.schemas.rooms import (
    RoomCreatePayload,
    RoomResponse,
    RoomStatusPayload,
    RoomStatusRepair,
    RoomUpdatePayload,
)
from hotel_ops.services.room_status import reconcile_room_statuses

logger = structlog.get_logger(__name__)
router = APIRouter()

# Sent by clients to mean "no filter"
ALL_FILTER = "All"


def _filter_value(value: Optional[str]) -> Optional[str]:
    return None if not value or value == ALL_FILTER else value


@router.get("", response_model=list[RoomResponse])
def get_rooms(
    status_filter: Optional[str] = Query(None, alias="status"),
    room_type: Optional[str] = Query(None, alias="type"),
    min_rate: Optional[float] = Query(None, alias="minRate", ge=0),
    max_rate: Optional[float] = Query(None, alias="maxRate", ge=0),
    principal: Principal = Depends(get_principal),
    db_engine: Engine = Depends(get_db_engine),
) -> list[dict[str, Any]]:
    """
    List rooms ordered by room number.

    Args:
        status_filter: Room status, or "All"
        room_type: Room type, or "All"
        min_rate: Inclusive minimum nightly rate
        max_rate: Inclusive maximum nightly rate

    Returns:
        list: Rooms matching every given filter
    """
    with db_engine.connect() as conn:
        return list_rooms(
            conn,
            status=_filter_value(status_filter),
            room_type=_filter_value(room_type),
            min_rate=min_rate,
            max_rate=max_rate,
        )


@router.post("/reconcile", response_model=list[RoomStatusRepair])
def reconcile_rooms(
    principal: Principal = Depends(require_roles(Role.ADMIN)),
    db_engine: Engine = Depends(get_db_engine),
) -> list[dict[str, Any]]:
    """Re-derive room statuses from bookings and return the repairs made."""
    return reconcile_room_statuses(db_engine)


@router.get("/{room_id}", response_model=RoomResponse)
def get_room_endpoint(
    room_id: str,
    principal: Principal = Depends(get_principal),
    db_engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    with db_engine.connect() as conn:
        room = get_room(conn, room_id)
    if room is None:
        raise RoomNotFound()
    return room


@router.post("", status_code=status.HTTP_201_CREATED, response_model=RoomResponse)
def create_room(
    payload: RoomCreatePayload,
    principal: Principal = Depends(require_roles(Role.ADMIN)),
    db_engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Add a room to the inventory.

    Returns:
        dict: Created room

    Raises:
        Conflict: Room number already in use
    """
    try:
        with db_engine.begin() as conn:
            if room_number_taken(conn, payload.room_number):
                raise Conflict(f"Room {payload.room_number} already exists")
            room = insert_room(conn, payload.model_dump(mode="json"))

        logger.info("room_created", room_id=room["id"], room_number=room["room_number"])
        return room

    except HotelOpsError:
        raise
    except IntegrityError:
        raise Conflict(f"Room {payload.room_number} already exists")
    except Exception as e:
        logger.exception("room_creation_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to create room")


@router.put("/{room_id}", response_model=RoomResponse)
def update_room_endpoint(
    room_id: str,
    payload: RoomUpdatePayload,
    principal: Principal = Depends(require_roles(Role.ADMIN)),
    db_engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """Edit a room; only fields present in the body change."""
    update_data = {k: v for k, v in payload.model_dump(mode="json").items() if v is not None}

    try:
        with db_engine.begin() as conn:
            if get_room(conn, room_id) is None:
                raise RoomNotFound()
            if "room_number" in update_data and room_number_taken(
                conn, update_data["room_number"], exclude_id=room_id
            ):
                raise Conflict(f"Room {update_data['room_number']} already exists")

            room = update_room(conn, room_id, update_data) if update_data else get_room(conn, room_id)

        if room is None:
            raise RoomNotFound()
        logger.info("room_updated", room_id=room_id, fields=sorted(update_data))
        return room

    except HotelOpsError:
        raise
    except IntegrityError:
        raise Conflict("Room number already exists")
    except Exception as e:
        logger.exception("room_update_failed", room_id=room_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to update room")


@router.delete("/{room_id}")
def delete_room_endpoint(
    room_id: str,
    principal: Principal = Depends(require_roles(Role.ADMIN)),
    db_engine: Engine = Depends(get_db_engine),
) -> dict[str, str]:
    """
    Remove a room.

    Raises:
        RoomNotFound: Unknown room
        Conflict: The room still holds active bookings
    """
    with db_engine.begin() as conn:
        if get_room(conn, room_id, for_update=True) is None:
            raise RoomNotFound()
        if has_active_bookings(conn, room_id=room_id):
            raise Conflict("Room has active bookings")
        delete_room(conn, room_id)

    logger.info("room_deleted", room_id=room_id)
    return {"message": "Room deleted successfully"}


@router.patch("/{room_id}/status", response_model=RoomResponse)
def patch_room_status(
    room_id: str,
    payload: RoomStatusPayload,
    principal: Principal = Depends(require_roles(Role.ADMIN, Role.RECEPTIONIST)),
    db_engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Override a room's status directly (e.g. Maintenance).

    Check-in and check-out will overwrite this value again.
    """
    with db_engine.begin() as conn:
        room = set_room_status(conn, room_id, payload.status.value)
    if room is None:
        raise RoomNotFound()

    logger.info(
        "room_status_overridden",
        room_id=room_id,
        status=payload.status.value,
        actor=principal.external_id,
    )
    return room
