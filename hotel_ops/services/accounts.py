"""Local account lifecycle: idempotent registration, admin creation and deletion."""

from __future__ import annotations

from typing import Any, Iterable, Optional

import structlog
from firebase_admin import exceptions as firebase_exceptions
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from hotel_ops.auth import firebase
from hotel_ops.auth.identity import VerifiedIdentity
from hotel_ops.auth.principal import Role
from hotel_ops.db.readers.accounts import get_account, get_account_by_email, get_account_by_uid
from hotel_ops.db.readers.bookings import has_active_bookings
from hotel_ops.db.writers.accounts import delete_account, insert_account
from hotel_ops.errors import AccountNotFound, Conflict, ValidationError

logger = structlog.get_logger(__name__)


def register_account(
    engine: Engine,
    identity: VerifiedIdentity,
    name: Optional[str] = None,
    email: Optional[str] = None,
    phone: Optional[str] = None,
) -> tuple[dict[str, Any], bool]:
    """
    Create the local account for a verified identity, once.

    Calling this again for the same uid returns the stored record untouched.
    New accounts always start as customers.

    Returns:
        tuple: (account row, True if it was created by this call)

    Raises:
        ValidationError: No email in the body or the token
        Conflict: The email already belongs to another uid
    """
    with engine.connect() as conn:
        existing = get_account_by_uid(conn, identity.external_id)
    if existing is not None:
        return existing, False

    account_email = email or identity.email
    if not account_email:
        raise ValidationError("Email is required")
    account_name = name or account_email.split("@", 1)[0]

    try:
        with engine.begin() as conn:
            account = insert_account(
                conn,
                {
                    "uid": identity.external_id,
                    "email": account_email,
                    "name": account_name,
                    "phone": phone,
                    "roles": [Role.CUSTOMER.value],
                },
            )
    except IntegrityError:
        # A concurrent registration of the same uid won the insert
        with engine.connect() as conn:
            existing = get_account_by_uid(conn, identity.external_id)
        if existing is not None:
            return existing, False
        raise Conflict("Email already registered")

    logger.info("account_registered", account_id=account["id"], email=account["email"])
    return account, True


def create_account_with_login(
    engine: Engine,
    email: str,
    password: str,
    name: str,
    phone: Optional[str] = None,
    roles: Iterable[Role] = (Role.CUSTOMER,),
) -> dict[str, Any]:
    """
    Create a Firebase login and its local account in one step (admin use).

    Raises:
        Conflict: The email is already registered locally or in Firebase
        ValidationError: Firebase rejected the email or password
    """
    with engine.connect() as conn:
        if get_account_by_email(conn, email) is not None:
            raise Conflict("Email already registered")

    try:
        uid = firebase.create_firebase_user(email=email, password=password, display_name=name)
    except firebase_exceptions.AlreadyExistsError as e:
        raise Conflict("Email already registered") from e
    except (ValueError, firebase_exceptions.InvalidArgumentError) as e:
        raise ValidationError(str(e)) from e

    role_values = sorted({role.value for role in roles}) or [Role.CUSTOMER.value]
    with engine.begin() as conn:
        account = insert_account(
            conn,
            {"uid": uid, "email": email, "name": name, "phone": phone, "roles": role_values},
        )

    logger.info("account_created", account_id=account["id"], roles=role_values)
    return account


def delete_account_everywhere(engine: Engine, account_id: str) -> None:
    """
    Delete an account locally, then its Firebase login.

    The active-booking check and the local delete share one transaction that
    holds the account row lock, so no booking can slip in between them. A
    Firebase failure is logged and does not undo the local deletion.

    Raises:
        AccountNotFound: Unknown account id
        Conflict: The account still holds active bookings
    """
    with engine.begin() as conn:
        account = get_account(conn, account_id, for_update=True)
        if account is None:
            raise AccountNotFound("User not found")
        if has_active_bookings(conn, guest_id=account_id):
            raise Conflict("User has active bookings")
        delete_account(conn, account_id)

    try:
        firebase.delete_firebase_user(account["uid"])
    except (ValueError, firebase_exceptions.FirebaseError) as e:
        logger.warning(
            "firebase_user_delete_failed",
            account_id=account_id,
            uid=account["uid"],
            error=str(e),
        )

    logger.info("account_deleted", account_id=account_id, uid=account["uid"])
