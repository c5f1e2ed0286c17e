"""Role gate applied after a request's principal has been resolved."""

from __future__ import annotations

from typing import Iterable

from hotel_ops.auth.principal import Principal, Role


def authorize(principal: Principal, allowed_roles: Iterable[Role]) -> bool:
    """
    Decide whether a principal may perform an operation.

    An empty ``allowed_roles`` only requires authentication. Otherwise the
    principal needs at least one of the listed roles.
    """
    allowed = frozenset(allowed_roles)
    if not allowed:
        return True
    return principal.has_any_role(allowed)
