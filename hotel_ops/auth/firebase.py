"""
Firebase Admin SDK wiring.

The app is initialised lazily from the service-account values in config so
that importing the API (and running the test-suite) never needs credentials.
"""

from __future__ import annotations

import threading
from typing import Any, Optional

import firebase_admin
import structlog
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials

from hotel_ops.config import (
    FIREBASE_CHECK_REVOKED,
    FIREBASE_CLIENT_EMAIL,
    FIREBASE_PRIVATE_KEY,
    FIREBASE_PROJECT_ID,
)

logger = structlog.get_logger(__name__)

_app_lock = threading.Lock()


def get_firebase_app() -> firebase_admin.App:
    """
    Return the default Firebase app, initialising it on first use.

    Raises:
        ValueError: If the service-account configuration is incomplete
    """
    with _app_lock:
        try:
            return firebase_admin.get_app()
        except ValueError:
            cred = credentials.Certificate(
                {
                    "type": "service_account",
                    "project_id": FIREBASE_PROJECT_ID,
                    "client_email": FIREBASE_CLIENT_EMAIL,
                    "private_key": FIREBASE_PRIVATE_KEY,
                    "token_uri": "https://oauth2.googleapis.com/token",
                }
            )
            app = firebase_admin.initialize_app(cred)
            logger.info("firebase_app_initialized", project_id=FIREBASE_PROJECT_ID)
            return app


def decode_id_token(token: str) -> dict[str, Any]:
    """
    Verify a Firebase ID token and return its claims.

    This is a blocking round-trip to Google (public keys, and the revocation
    check when enabled). Errors from the SDK propagate to the caller.
    """
    app = get_firebase_app()
    return firebase_auth.verify_id_token(token, app=app, check_revoked=FIREBASE_CHECK_REVOKED)


def create_firebase_user(email: str, password: str, display_name: Optional[str] = None) -> str:
    """Create a Firebase user and return its uid."""
    record = firebase_auth.create_user(
        email=email,
        password=password,
        display_name=display_name,
        app=get_firebase_app(),
    )
    return record.uid


def delete_firebase_user(uid: str) -> None:
    firebase_auth.delete_user(uid, app=get_firebase_app())
