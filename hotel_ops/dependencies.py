"""
FastAPI dependency providers.

The database engine and the caller's Principal reach route handlers only
through these providers, so tests can swap either with
``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import Callable, Generator, Optional

import structlog
from fastapi import Depends, Header
from sqlalchemy.engine import Engine

from hotel_ops.auth.guard import authorize
from hotel_ops.auth.identity import VerifiedIdentity, verify_credential
from hotel_ops.auth.principal import Principal, Role, resolve_principal
from hotel_ops.db.engine import engine
from hotel_ops.errors import Forbidden

logger = structlog.get_logger(__name__)


def get_db_engine() -> Generator[Engine, None, None]:
    """
    Provide database engine for dependency injection.

    Yields:
        Engine: SQLAlchemy database engine

    Testing Example:
        >>> test_engine = build_engine("sqlite:///./test.db")
        >>> app.dependency_overrides[get_db_engine] = lambda: test_engine
    """
    yield engine


def get_verified_identity(
    authorization: Optional[str] = Header(None),
) -> VerifiedIdentity:
    """Verify the request's bearer credential (401 on failure)."""
    return verify_credential(authorization)


def get_principal(
    identity: VerifiedIdentity = Depends(get_verified_identity),
    db_engine: Engine = Depends(get_db_engine),
) -> Principal:
    """Resolve the verified identity to a Principal with roles and local id."""
    with db_engine.connect() as conn:
        return resolve_principal(conn, identity)


def require_roles(*allowed: Role) -> Callable[..., Principal]:
    """
    Build a dependency that admits principals holding one of ``allowed``.

    With no roles given, any authenticated principal passes.

    Example:
        >>> @router.post("/{booking_id}/checkin")
        ... def check_in(
        ...     booking_id: str,
        ...     principal: Principal = Depends(require_roles(Role.ADMIN, Role.RECEPTIONIST)),
        ... ): ...
    """
    allowed_roles = frozenset(allowed)

    def dependency(principal: Principal = Depends(get_principal)) -> Principal:
        if not authorize(principal, allowed_roles):
            logger.warning(
                "authorization_denied",
                external_id=principal.external_id,
                roles=sorted(role.value for role in principal.roles),
                required=sorted(role.value for role in allowed_roles),
            )
            raise Forbidden()
        return principal

    return dependency
