"""
Principal model - user accounts for ScaleUp Horizon.

A principal may belong to several organizations through memberships.
Active/default organization columns are weak references (plain ids).
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Index, JSON, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.utils.time import utc_now


def default_preferences() -> dict:
    return {
        "theme": "system",
        "locale": "en",
        "emailNotifications": True,
        "inAppNotifications": True,
    }


class Principal(Base):
    """
    Principal table - represents authenticated users in the system.

    Invariants:
    - password_hash is set iff is_account_active is True
    - a live setup_token implies the account is not yet active
    """

    __tablename__ = "principal"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # Stored lower-cased; unique across all principals
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    password_hash: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    is_account_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    is_platform_admin: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    active_organization_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    default_organization_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)

    preferences: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=default_preferences,
    )

    last_login_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Single-use capabilities
    setup_token: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    setup_token_expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    reset_token: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    reset_token_expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        onupdate=utc_now,
        nullable=False,
    )

    __table_args__ = (
        Index("ix_principal_email", "email", unique=True),
        Index("ix_principal_setup_token", "setup_token"),
        Index("ix_principal_reset_token", "reset_token"),
    )

    def __repr__(self):
        return f"<Principal(id={self.id}, email={self.email}, active={self.is_account_active})>"
