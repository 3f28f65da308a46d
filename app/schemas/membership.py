"""
Membership Pydantic schemas.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field

from app.models.enums import MembershipRole, MembershipStatus
from app.schemas.base import CamelModel


class MembershipRead(CamelModel):
    id: UUID
    principal_id: UUID
    organization_id: UUID
    role: MembershipRole
    status: MembershipStatus
    invited_by_id: UUID
    created_at: datetime
    updated_at: datetime


class MemberRead(CamelModel):
    """A membership joined with the member's principal summary."""

    membership_id: UUID
    principal_id: UUID
    name: str
    email: str
    role: MembershipRole
    status: MembershipStatus
    is_account_active: bool
    last_login_at: Optional[datetime] = None
    joined_at: datetime
    invited_by_id: UUID

    @classmethod
    def from_row(cls, membership, principal) -> "MemberRead":
        return cls(
            membership_id=membership.id,
            principal_id=principal.id,
            name=principal.name,
            email=principal.email,
            role=membership.role,
            status=membership.status,
            is_account_active=principal.is_account_active,
            last_login_at=principal.last_login_at,
            joined_at=membership.created_at,
            invited_by_id=membership.invited_by_id,
        )


class ProvisionRequest(CamelModel):
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=255)
    role: MembershipRole = MembershipRole.MEMBER


class ProvisionResponse(CamelModel):
    user_id: UUID
    membership_id: UUID
    email: str
    name: str
    role: MembershipRole
    status: MembershipStatus
    setup_token: str
    setup_link: str
    instructions: str


class RoleChangeRequest(CamelModel):
    new_role: MembershipRole


class MemberRemovedResponse(CamelModel):
    message: str
    principal_id: UUID
