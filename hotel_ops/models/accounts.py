"""SQLAlchemy model for local user accounts linked to Firebase identities."""

import uuid

from sqlalchemy import JSON, Column, DateTime, String

from hotel_ops.models.base import Base
from hotel_ops.utils.datetime import utc_now


class Account(Base):
    """
    ORM model for a guest or staff member.

    ``uid`` is the Firebase subject identifier and is unique; ``id`` is the
    local identifier that bookings reference as their guest.
    """

    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    uid = Column(String(128), nullable=False, unique=True, index=True)
    email = Column(String(320), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(64), nullable=True)
    roles = Column(JSON, nullable=False, default=lambda: ["customer"])
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)
