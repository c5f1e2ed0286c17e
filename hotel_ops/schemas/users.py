from datetime import datetime
from typing import Optional

from pydantic import Field

from hotel_ops.auth.principal import Role
from hotel_ops.schemas.base import CamelModel


class RegisterPayload(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = Field(None, description="Defaults to the email in the token")
    phone: Optional[str] = None


class ProfileUpdatePayload(CamelModel):
    """
    Fields a user may change on their own profile.

    uid and roles are not part of the schema, so they are dropped if sent.
    """

    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, min_length=3)
    phone: Optional[str] = None


class UserCreatePayload(CamelModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1)
    phone: Optional[str] = None
    roles: list[Role] = Field(default_factory=lambda: [Role.CUSTOMER])


class AccountResponse(CamelModel):
    id: str
    uid: str
    email: str
    name: str
    phone: Optional[str] = None
    roles: list[str]
    created_at: datetime
    updated_at: datetime
