"""
Shared fixtures: a file-backed SQLite database per test, fake Firebase tokens,
one seeded account per role and a TestClient wired to the test database.
"""

from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime, timedelta, timezone  # noqa: E402
from pathlib import Path  # noqa: E402
from typing import Any, Callable, Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from firebase_admin import auth as firebase_auth  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402

import hotel_ops.models.accounts  # noqa: E402, F401
import hotel_ops.models.bookings  # noqa: E402, F401
import hotel_ops.models.rooms  # noqa: E402, F401
from hotel_ops.auth.principal import Principal, Role  # noqa: E402
from hotel_ops.db.engine import build_engine  # noqa: E402
from hotel_ops.db.writers.accounts import insert_account  # noqa: E402
from hotel_ops.db.writers.rooms import insert_room  # noqa: E402
from hotel_ops.dependencies import get_db_engine  # noqa: E402
from hotel_ops.main import app  # noqa: E402
from hotel_ops.models.base import Base  # noqa: E402

# token -> (uid, email); the newcomer is known to Firebase but never registered
TOKENS: dict[str, tuple[str, str]] = {
    "admin-token": ("uid-admin", "admin@hotel.test"),
    "manager-token": ("uid-manager", "manager@hotel.test"),
    "reception-token": ("uid-reception", "desk@hotel.test"),
    "customer-token": ("uid-customer", "guest@hotel.test"),
    "other-customer-token": ("uid-other", "other@hotel.test"),
    "newcomer-token": ("uid-newcomer", "newcomer@hotel.test"),
}

SEEDED: dict[str, tuple[str, Role]] = {
    "admin": ("admin-token", Role.ADMIN),
    "manager": ("manager-token", Role.MANAGER),
    "receptionist": ("reception-token", Role.RECEPTIONIST),
    "customer": ("customer-token", Role.CUSTOMER),
    "other_customer": ("other-customer-token", Role.CUSTOMER),
}

BASE_DAY = datetime(2030, 1, 10, tzinfo=timezone.utc)


def fake_decode_id_token(token: str) -> dict[str, Any]:
    if token not in TOKENS:
        raise firebase_auth.InvalidIdTokenError("Invalid ID token")
    uid, email = TOKENS[token]
    return {"uid": uid, "email": email}


@pytest.fixture(autouse=True)
def fake_firebase(monkeypatch: pytest.MonkeyPatch) -> None:
    """Verify bearer tokens against the static TOKENS table instead of Google."""
    monkeypatch.setattr("hotel_ops.auth.firebase.decode_id_token", fake_decode_id_token)


@pytest.fixture
def day() -> Callable[[int], str]:
    """ISO timestamp ``offset`` days after a fixed base day."""

    def _day(offset: int) -> str:
        return (BASE_DAY + timedelta(days=offset)).isoformat()

    return _day


@pytest.fixture
def db_engine(tmp_path: Path) -> Generator[Engine, None, None]:
    """Create a fresh SQLite database with the full schema."""
    engine = build_engine(f"sqlite:///{tmp_path / 'hotel_ops.db'}")
    Base.metadata.create_all(engine)

    yield engine

    engine.dispose()


@pytest.fixture
def accounts(db_engine: Engine) -> dict[str, dict[str, Any]]:
    """Seed one account per role, keyed by role name."""
    seeded: dict[str, dict[str, Any]] = {}
    with db_engine.begin() as conn:
        for key, (token, role) in SEEDED.items():
            uid, email = TOKENS[token]
            seeded[key] = insert_account(
                conn,
                {
                    "uid": uid,
                    "email": email,
                    "name": key.replace("_", " ").title(),
                    "phone": "+1-555-0100",
                    "roles": [role.value],
                },
            )
    return seeded


@pytest.fixture
def principals(accounts: dict[str, dict[str, Any]]) -> dict[str, Principal]:
    """Principals for the seeded accounts, plus an unregistered newcomer."""
    resolved = {
        key: Principal(
            external_id=account["uid"],
            email=account["email"],
            roles=frozenset(Role(value) for value in account["roles"]),
            local_id=account["id"],
        )
        for key, account in accounts.items()
    }
    resolved["newcomer"] = Principal(external_id="uid-newcomer", email="newcomer@hotel.test")
    return resolved


@pytest.fixture
def headers() -> dict[str, dict[str, str]]:
    """Authorization headers keyed by role name."""
    result = {key: {"Authorization": f"Bearer {token}"} for key, (token, _) in SEEDED.items()}
    result["newcomer"] = {"Authorization": "Bearer newcomer-token"}
    return result


@pytest.fixture
def make_room(db_engine: Engine) -> Callable[..., dict[str, Any]]:
    """Factory inserting rooms straight into the test database."""

    def _make_room(
        room_number: str = "101",
        room_type: str = "Double",
        rate: float = 120.0,
        status: str = "Available",
    ) -> dict[str, Any]:
        with db_engine.begin() as conn:
            return insert_room(
                conn,
                {"room_number": room_number, "type": room_type, "rate": rate, "status": status},
            )

    return _make_room


@pytest.fixture
def room(make_room: Callable[..., dict[str, Any]]) -> dict[str, Any]:
    return make_room()


@pytest.fixture
def client(db_engine: Engine) -> Generator[TestClient, None, None]:
    """TestClient whose routes use the per-test SQLite database."""
    app.dependency_overrides[get_db_engine] = lambda: db_engine
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
