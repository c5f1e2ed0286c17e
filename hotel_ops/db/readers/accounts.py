from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection

from hotel_ops.db._rows import row_to_dict
from hotel_ops.models.accounts import Account

accounts = Account.__table__


def get_account_by_uid(conn: Connection, uid: str) -> Optional[dict[str, Any]]:
    """
    Fetch the local account linked to a Firebase uid.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        uid (str): Firebase subject identifier.

    Returns:
        Optional[dict[str, Any]]: Account row, or None if the uid never registered.
    """
    row = conn.execute(select(accounts).where(accounts.c.uid == uid)).mappings().fetchone()
    return row_to_dict(row) if row else None


def get_account(
    conn: Connection, account_id: str, for_update: bool = False
) -> Optional[dict[str, Any]]:
    """
    Fetch an account by its local id.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        account_id (str): Local account id.
        for_update (bool): Lock the row until the transaction ends.

    Returns:
        Optional[dict[str, Any]]: Account row or None.
    """
    stmt = select(accounts).where(accounts.c.id == account_id)
    if for_update:
        stmt = stmt.with_for_update()
    row = conn.execute(stmt).mappings().fetchone()
    return row_to_dict(row) if row else None


def get_account_by_email(conn: Connection, email: str) -> Optional[dict[str, Any]]:
    row = conn.execute(select(accounts).where(accounts.c.email == email)).mappings().fetchone()
    return row_to_dict(row) if row else None


def list_accounts(conn: Connection) -> list[dict[str, Any]]:
    """
    List every account, newest first.

    Args:
        conn (Connection): An active SQLAlchemy database connection.

    Returns:
        list[dict[str, Any]]: Account rows.
    """
    result = conn.execute(select(accounts).order_by(accounts.c.created_at.desc()))
    return [row_to_dict(row) for row in result.mappings()]
