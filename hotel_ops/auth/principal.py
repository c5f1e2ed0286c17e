"""Principal model and resolution of verified identities to local accounts."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable, Optional

from sqlalchemy.engine import Connection

from hotel_ops.auth.identity import VerifiedIdentity
from hotel_ops.db.readers.accounts import get_account_by_uid


class Role(str, enum.Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    RECEPTIONIST = "receptionist"
    CUSTOMER = "customer"


STAFF_ROLES: frozenset[Role] = frozenset({Role.ADMIN, Role.RECEPTIONIST})
DEFAULT_ROLES: frozenset[Role] = frozenset({Role.CUSTOMER})


def parse_roles(values: Iterable[str] | None) -> frozenset[Role]:
    """Convert stored role strings to Role members, dropping unknown values."""
    known = {role.value for role in Role}
    return frozenset(Role(value) for value in (values or ()) if value in known)


@dataclass(frozen=True)
class Principal:
    """
    An authenticated actor.

    ``local_id`` is None until the identity has registered a local account.
    """

    external_id: str
    email: Optional[str] = None
    roles: frozenset[Role] = field(default_factory=lambda: DEFAULT_ROLES)
    local_id: Optional[str] = None

    def has_any_role(self, roles: Iterable[Role]) -> bool:
        return not self.roles.isdisjoint(roles)

    @property
    def is_staff(self) -> bool:
        return self.has_any_role(STAFF_ROLES)


def resolve_principal(conn: Connection, identity: VerifiedIdentity) -> Principal:
    """
    Map a verified identity to a Principal.

    A missing account resolves to a customer without a local id. Nothing is
    created here; registration is an explicit call.
    """
    account = get_account_by_uid(conn, identity.external_id)
    if account is None:
        return Principal(external_id=identity.external_id, email=identity.email)

    roles = parse_roles(account["roles"]) or DEFAULT_ROLES
    return Principal(
        external_id=identity.external_id,
        email=identity.email or account["email"],
        roles=roles,
        local_id=account["id"],
    )
