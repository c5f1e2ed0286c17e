"""
Integration tests for /api/rooms endpoints.
"""

from __future__ import annotations

from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient

Headers = dict[str, dict[str, str]]


@pytest.fixture
def inventory(make_room: Callable[..., dict[str, Any]]) -> list[dict[str, Any]]:
    return [
        make_room("301", "Suite", 400.0),
        make_room("101", "Single", 80.0),
        make_room("201", "Double", 150.0, status="Maintenance"),
        make_room("102", "Single", 90.0, status="Cleaning"),
    ]


@pytest.mark.integration
def test_list_rooms_sorted_by_number(
    client: TestClient, headers: Headers, accounts: dict[str, Any], inventory: list[Any]
) -> None:
    response = client.get("/api/rooms", headers=headers["customer"])

    assert response.status_code == 200
    assert [room["roomNumber"] for room in response.json()] == ["101", "102", "201", "301"]


@pytest.mark.integration
@pytest.mark.parametrize(
    "params,expected",
    [
        ({"type": "Single"}, ["101", "102"]),
        ({"type": "All", "status": "All"}, ["101", "102", "201", "301"]),
        ({"status": "Maintenance"}, ["201"]),
        ({"minRate": 90, "maxRate": 150}, ["102", "201"]),
        ({"type": "Single", "maxRate": 85}, ["101"]),
        ({"type": "Penthouse"}, []),
    ],
)
def test_list_rooms_filters(
    client: TestClient,
    headers: Headers,
    accounts: dict[str, Any],
    inventory: list[Any],
    params: dict[str, Any],
    expected: list[str],
) -> None:
    response = client.get("/api/rooms", params=params, headers=headers["customer"])

    assert response.status_code == 200
    assert [room["roomNumber"] for room in response.json()] == expected


@pytest.mark.integration
def test_list_rooms_requires_authentication(client: TestClient) -> None:
    assert client.get("/api/rooms").status_code == 401


@pytest.mark.integration
def test_get_room(
    client: TestClient, headers: Headers, accounts: dict[str, Any], room: dict[str, Any]
) -> None:
    found = client.get(f"/api/rooms/{room['id']}", headers=headers["customer"])
    missing = client.get("/api/rooms/no-such-room", headers=headers["customer"])

    assert found.status_code == 200
    assert found.json()["roomNumber"] == room["room_number"]
    assert missing.status_code == 404
    assert missing.json() == {"error": "Room not found"}


@pytest.mark.integration
def test_admin_creates_room(client: TestClient, headers: Headers, accounts: dict[str, Any]) -> None:
    response = client.post(
        "/api/rooms",
        json={"roomNumber": "401", "type": "Suite", "rate": 320},
        headers=headers["admin"],
    )

    assert response.status_code == 201
    data = response.json()
    assert data["roomNumber"] == "401"
    assert data["status"] == "Available"
    assert data["rate"] == 320


@pytest.mark.integration
def test_duplicate_room_number_returns_409(
    client: TestClient, headers: Headers, accounts: dict[str, Any], room: dict[str, Any]
) -> None:
    response = client.post(
        "/api/rooms",
        json={"roomNumber": room["room_number"], "type": "Single", "rate": 50},
        headers=headers["admin"],
    )

    assert response.status_code == 409


@pytest.mark.integration
def test_negative_rate_returns_400(
    client: TestClient, headers: Headers, accounts: dict[str, Any]
) -> None:
    response = client.post(
        "/api/rooms",
        json={"roomNumber": "402", "type": "Single", "rate": -1},
        headers=headers["admin"],
    )

    assert response.status_code == 400


@pytest.mark.integration
@pytest.mark.parametrize("role", ["receptionist", "manager", "customer"])
def test_only_admin_edits_inventory(
    client: TestClient, headers: Headers, accounts: dict[str, Any], room: dict[str, Any], role: str
) -> None:
    created = client.post(
        "/api/rooms", json={"roomNumber": "403", "type": "Single"}, headers=headers[role]
    )
    updated = client.put(f"/api/rooms/{room['id']}", json={"rate": 1}, headers=headers[role])
    deleted = client.delete(f"/api/rooms/{room['id']}", headers=headers[role])

    assert created.status_code == 403
    assert updated.status_code == 403
    assert deleted.status_code == 403


@pytest.mark.integration
def test_update_room_changes_only_sent_fields(
    client: TestClient, headers: Headers, accounts: dict[str, Any], room: dict[str, Any]
) -> None:
    response = client.put(
        f"/api/rooms/{room['id']}", json={"rate": 175.5}, headers=headers["admin"]
    )

    assert response.status_code == 200
    data = response.json()
    assert data["rate"] == 175.5
    assert data["roomNumber"] == room["room_number"]
    assert data["type"] == room["type"]


@pytest.mark.integration
def test_update_unknown_room_returns_404(
    client: TestClient, headers: Headers, accounts: dict[str, Any]
) -> None:
    response = client.put("/api/rooms/no-such-room", json={"rate": 1}, headers=headers["admin"])

    assert response.status_code == 404


@pytest.mark.integration
def test_update_to_taken_number_returns_409(
    client: TestClient,
    headers: Headers,
    accounts: dict[str, Any],
    make_room: Callable[..., dict[str, Any]],
) -> None:
    make_room("101")
    other = make_room("102")

    response = client.put(
        f"/api/rooms/{other['id']}", json={"roomNumber": "101"}, headers=headers["admin"]
    )

    assert response.status_code == 409


@pytest.mark.integration
def test_receptionist_overrides_status(
    client: TestClient, headers: Headers, accounts: dict[str, Any], room: dict[str, Any]
) -> None:
    response = client.patch(
        f"/api/rooms/{room['id']}/status",
        json={"status": "Maintenance"},
        headers=headers["receptionist"],
    )
    rejected = client.patch(
        f"/api/rooms/{room['id']}/status",
        json={"status": "Closed"},
        headers=headers["receptionist"],
    )
    customer = client.patch(
        f"/api/rooms/{room['id']}/status", json={"status": "Available"}, headers=headers["customer"]
    )

    assert response.status_code == 200
    assert response.json()["status"] == "Maintenance"
    assert rejected.status_code == 400
    assert customer.status_code == 403


@pytest.mark.integration
def test_delete_room(
    client: TestClient,
    headers: Headers,
    accounts: dict[str, Any],
    room: dict[str, Any],
    day: Callable[[int], str],
) -> None:
    booking = client.post(
        "/api/bookings",
        json={"roomId": room["id"], "checkIn": day(0), "checkOut": day(1)},
        headers=headers["customer"],
    ).json()

    blocked = client.delete(f"/api/rooms/{room['id']}", headers=headers["admin"])
    client.post(f"/api/bookings/{booking['id']}/cancel", headers=headers["customer"])
    deleted = client.delete(f"/api/rooms/{room['id']}", headers=headers["admin"])
    missing = client.get(f"/api/rooms/{room['id']}", headers=headers["admin"])

    assert blocked.status_code == 409
    assert deleted.status_code == 200
    assert deleted.json() == {"message": "Room deleted successfully"}
    assert missing.status_code == 404


@pytest.mark.integration
def test_reconcile_endpoint(
    client: TestClient,
    headers: Headers,
    accounts: dict[str, Any],
    make_room: Callable[..., dict[str, Any]],
) -> None:
    make_room("501", status="Occupied")

    forbidden = client.post("/api/rooms/reconcile", headers=headers["receptionist"])
    response = client.post("/api/rooms/reconcile", headers=headers["admin"])

    assert forbidden.status_code == 403
    assert response.status_code == 200
    assert response.json() == [
        {
            "roomId": response.json()[0]["roomId"],
            "roomNumber": "501",
            "fromStatus": "Occupied",
            "toStatus": "Cleaning",
        }
    ]
