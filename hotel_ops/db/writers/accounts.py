import logging
import uuid
from typing import Any, Optional

from sqlalchemy import delete, insert, update
from sqlalchemy.engine import Connection

from hotel_ops.db.readers.accounts import get_account
from hotel_ops.models.accounts import Account
from hotel_ops.utils.datetime import utc_now

logger = logging.getLogger(__name__)


def insert_account(conn: Connection, data: dict[str, Any]) -> dict[str, Any]:
    """
    Insert a new local account.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        data (dict): uid, email, name and optional phone and roles.

    Returns:
        dict[str, Any]: The stored row.

    Raises:
        sqlalchemy.exc.IntegrityError: If uid or email is already taken.
    """
    now = utc_now()
    row = {
        "id": str(uuid.uuid4()),
        "uid": data["uid"],
        "email": data["email"],
        "name": data["name"],
        "phone": data.get("phone"),
        "roles": list(data.get("roles") or ["customer"]),
        "created_at": now,
        "updated_at": now,
    }
    conn.execute(insert(Account).values(**row))
    logger.info("Inserted account id=%s uid=%s", row["id"], row["uid"])
    return row


def update_account(
    conn: Connection, account_id: str, data: dict[str, Any]
) -> Optional[dict[str, Any]]:
    """
    Update account fields for an existing account.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        account_id (str): Local account id.
        data (dict): Fields to update (only non-None values)

    Returns:
        Optional[dict[str, Any]]: Updated row, or None if the account does not exist.
    """
    values = dict(data)
    values["updated_at"] = utc_now()

    result = conn.execute(update(Account).where(Account.id == account_id).values(**values))
    if result.rowcount == 0:
        return None
    return get_account(conn, account_id)


def delete_account(conn: Connection, account_id: str) -> bool:
    """
    Permanently delete an account.

    Returns:
        bool: True if a row was deleted.
    """
    result = conn.execute(delete(Account).where(Account.id == account_id))
    return result.rowcount > 0
