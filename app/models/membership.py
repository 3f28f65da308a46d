"""
Membership model - the (principal, organization) edge.

Each record grants one principal one role in one organization.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.models.enums import MembershipRole, MembershipStatus, enum_values
from app.utils.time import utc_now


class Membership(Base):
    """Membership table - role and status of a principal inside an organization."""

    __tablename__ = "membership"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    principal_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("principal.id"),
        nullable=False,
    )

    organization_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("organization.id"),
        nullable=False,
    )

    role: Mapped[MembershipRole] = mapped_column(
        Enum(MembershipRole, native_enum=False, length=20, values_callable=enum_values),
        nullable=False,
    )

    status: Mapped[MembershipStatus] = mapped_column(
        Enum(MembershipStatus, native_enum=False, length=32, values_callable=enum_values),
        nullable=False,
        default=MembershipStatus.PENDING_USER_SETUP,
    )

    # Owner who provisioned the membership (self for the registering owner)
    invited_by_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("principal.id"),
        nullable=False,
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

    __table_args__ = (
        Index("ix_membership_principal_organization", "principal_id", "organization_id", unique=True),
        Index("ix_membership_organization_status", "organization_id", "status"),
        Index("ix_membership_principal_status", "principal_id", "status"),
    )

    @property
    def is_active(self) -> bool:
        return self.status == MembershipStatus.ACTIVE

    def __repr__(self):
        return f"<Membership(principal={self.principal_id}, organization={self.organization_id}, role={self.role})>"
