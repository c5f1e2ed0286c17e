"""
Unit tests for error rendering.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from hotel_ops.errors import (
    BookingNotFound,
    Conflict,
    InvalidTransition,
    ProfileMissing,
    RoomUnavailable,
    handle_http_exception,
    handle_hotel_ops_error,
    register_error_handlers,
)


class Body(BaseModel):
    room_id: str


@pytest.fixture
def error_client() -> TestClient:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/unavailable")
    def unavailable() -> None:
        raise RoomUnavailable()

    @app.get("/missing")
    def missing() -> None:
        raise BookingNotFound()

    @app.get("/http")
    def http_error() -> None:
        raise HTTPException(status_code=500, detail="Failed to create booking")

    @app.post("/body")
    def body(payload: Body) -> dict[str, str]:
        return {"room_id": payload.room_id}

    @app.get("/crash")
    def crash() -> None:
        raise RuntimeError("database exploded")

    return TestClient(app, raise_server_exceptions=False)


@pytest.mark.unit
def test_domain_errors_render_with_their_status(error_client: TestClient) -> None:
    response = error_client.get("/unavailable")

    assert response.status_code == 409
    assert response.json() == {"error": "Room is already booked for these dates"}

    response = error_client.get("/missing")
    assert response.status_code == 404
    assert response.json() == {"error": "Booking not found"}


@pytest.mark.unit
def test_http_exceptions_use_the_error_envelope(error_client: TestClient) -> None:
    response = error_client.get("/http")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to create booking"}


@pytest.mark.unit
def test_unknown_routes_use_the_error_envelope(error_client: TestClient) -> None:
    response = error_client.get("/nowhere")

    assert response.status_code == 404
    assert "error" in response.json()


@pytest.mark.unit
def test_request_validation_is_400(error_client: TestClient) -> None:
    response = error_client.post("/body", json={})

    assert response.status_code == 400
    assert response.json()["error"].startswith("room_id")


@pytest.mark.unit
def test_unexpected_errors_hide_details(error_client: TestClient) -> None:
    response = error_client.get("/crash")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


@pytest.mark.unit
def test_error_hierarchy() -> None:
    assert issubclass(RoomUnavailable, Conflict)
    assert issubclass(InvalidTransition, Conflict)
    assert ProfileMissing.status_code == 400
    assert InvalidTransition("Cannot move booking").message == "Cannot move booking"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_handlers_render_when_called_directly() -> None:
    """Test the handlers outside the app, as Starlette dispatches them."""
    request = Request({"type": "http", "method": "GET", "path": "/direct", "headers": []})

    domain = await handle_hotel_ops_error(request, RoomUnavailable())
    teapot = StarletteHTTPException(status_code=418, detail="No")
    http = await handle_http_exception(request, teapot)

    assert domain.status_code == 409
    assert domain.body == b'{"error":"Room is already booked for these dates"}'
    assert http.status_code == 418
    assert http.body == b'{"error":"No"}'
