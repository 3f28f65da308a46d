"""
Organization model.

An Organization is a tenant: no data is visible across organizations.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Enum, ForeignKey, JSON, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.models.enums import Currency, enum_values
from app.utils.time import utc_now

DEFAULT_TIMEZONE = "Asia/Kolkata"


def default_settings() -> dict:
    return {
        "dateFormat": "YYYY-MM-DD",
        "financialYearStartMonth": 4,
        "financialYearStartDay": 1,
    }


class Organization(Base):
    """
    Organization table - represents a customer organization.

    Note: Organization doesn't inherit from TenantScopedModel because
    the organization row itself doesn't belong to a tenant.
    """

    __tablename__ = "organization"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(
        String(150),
        nullable=False,
    )

    # Principal who registered the organization
    created_by_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("principal.id"),
        nullable=False,
        index=True,
    )

    industry: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    timezone: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        default=DEFAULT_TIMEZONE,
    )

    currency: Mapped[Currency] = mapped_column(
        Enum(Currency, native_enum=False, length=3, values_callable=enum_values),
        nullable=False,
        default=Currency.INR,
    )

    settings: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=default_settings,
    )

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

    def __repr__(self):
        return f"<Organization(id={self.id}, name={self.name})>"
