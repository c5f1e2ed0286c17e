from typing import Any

import structlog
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from hotel_ops.auth.identity import VerifiedIdentity
from hotel_ops.auth.principal import Principal, Role
from hotel_ops.db.readers.accounts import get_account_by_uid, list_accounts
from hotel_ops.db.writers.accounts import update_account
from hotel_ops.dependencies import (
    get_db_engine,
    get_principal,
    get_verified_identity,
    require_roles,
)
from hotel_ops.errors import AccountNotFound, Conflict
from hotel_ops.schemas.users import (
    AccountResponse,
    ProfileUpdatePayload,
    RegisterPayload,
    UserCreatePayload,
)
from hotel_ops.services.accounts import (
    create_account_with_login,
    delete_account_everywhere,
    register_account,
)

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/register", response_model=AccountResponse)
def register(
    payload: RegisterPayload,
    response: Response,
    identity: VerifiedIdentity = Depends(get_verified_identity),
    db_engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Create the caller's local account after Firebase sign-up.

    Idempotent: 201 with the new account the first time, 200 with the
    existing account on every later call.
    """
    account, created = register_account(
        db_engine,
        identity,
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
    )
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return account


@router.get("/me", response_model=AccountResponse)
def get_me(
    principal: Principal = Depends(get_principal),
    db_engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    with db_engine.connect() as conn:
        account = get_account_by_uid(conn, principal.external_id)
    if account is None:
        raise AccountNotFound()
    return account


@router.put("/me", response_model=AccountResponse)
def update_me(
    payload: ProfileUpdatePayload,
    principal: Principal = Depends(get_principal),
    db_engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """Update the caller's own name, email or phone. Roles cannot be changed here."""
    if not principal.local_id:
        raise AccountNotFound()

    update_data = {k: v for k, v in payload.model_dump().items() if v is not None}
    try:
        with db_engine.begin() as conn:
            account = update_account(conn, principal.local_id, update_data)
    except IntegrityError:
        raise Conflict("Email already registered")

    if account is None:
        raise AccountNotFound()
    logger.info("profile_updated", account_id=principal.local_id, fields=sorted(update_data))
    return account


@router.get("", response_model=list[AccountResponse])
def get_users(
    principal: Principal = Depends(require_roles(Role.ADMIN, Role.MANAGER, Role.RECEPTIONIST)),
    db_engine: Engine = Depends(get_db_engine),
) -> list[dict[str, Any]]:
    with db_engine.connect() as conn:
        return list_accounts(conn)


@router.post("/create", status_code=status.HTTP_201_CREATED, response_model=AccountResponse)
def create_user(
    payload: UserCreatePayload,
    principal: Principal = Depends(require_roles(Role.ADMIN)),
    db_engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """Create a login and local account, e.g. for a new receptionist."""
    return create_account_with_login(
        db_engine,
        email=payload.email,
        password=payload.password,
        name=payload.name,
        phone=payload.phone,
        roles=payload.roles,
    )


@router.delete("/{account_id}")
def delete_user(
    account_id: str,
    principal: Principal = Depends(require_roles(Role.ADMIN)),
    db_engine: Engine = Depends(get_db_engine),
) -> dict[str, str]:
    delete_account_everywhere(db_engine, account_id)
    return {"message": "User deleted successfully"}
