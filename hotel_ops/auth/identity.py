"""
Bearer credential verification against Firebase Authentication.

Nothing here is cached: a revoked or expired token fails on the very next
request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import structlog
from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions

from hotel_ops.auth import firebase
from hotel_ops.errors import Unauthenticated
from hotel_ops.metrics import auth_failures

logger = structlog.get_logger(__name__)

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class VerifiedIdentity:
    external_id: str
    email: Optional[str] = None


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Pull the token out of an ``Authorization: Bearer <token>`` header.

    Raises:
        Unauthenticated: If the header is missing, uses another scheme or
            carries an empty token
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        auth_failures.labels(reason="missing_bearer").inc()
        raise Unauthenticated("Missing bearer token")

    token = authorization[len(BEARER_PREFIX) :].strip()
    if not token:
        auth_failures.labels(reason="missing_bearer").inc()
        raise Unauthenticated("Missing bearer token")
    return token


def _failure_reason(exc: Exception) -> str:
    if isinstance(exc, firebase_auth.ExpiredIdTokenError):
        return "expired"
    if isinstance(exc, firebase_auth.RevokedIdTokenError):
        return "revoked"
    if isinstance(exc, firebase_auth.UserDisabledError):
        return "disabled"
    if isinstance(exc, firebase_auth.CertificateFetchError):
        return "provider_unreachable"
    return "invalid"


def verify_credential(authorization: Optional[str]) -> VerifiedIdentity:
    """
    Verify the bearer credential of one request.

    The scheme is checked first, so a malformed header never reaches the
    identity provider.

    Args:
        authorization: Raw Authorization header value

    Returns:
        VerifiedIdentity: Firebase uid and (optional) email

    Raises:
        Unauthenticated: Malformed, expired, revoked or otherwise invalid token
    """
    token = extract_bearer_token(authorization)

    try:
        claims = firebase.decode_id_token(token)
    except (ValueError, firebase_exceptions.FirebaseError) as e:
        reason = _failure_reason(e)
        auth_failures.labels(reason=reason).inc()
        logger.warning("authentication_failed", reason=reason, error=str(e))
        raise Unauthenticated("Invalid or expired token") from e

    uid = claims.get("uid") or claims.get("sub")
    if not uid:
        auth_failures.labels(reason="invalid").inc()
        logger.warning("authentication_failed", reason="missing_subject")
        raise Unauthenticated("Invalid or expired token")

    return VerifiedIdentity(external_id=str(uid), email=claims.get("email"))
