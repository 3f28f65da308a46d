"""
Authentication schemas: requests and the shared auth response.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import EmailStr, Field

from app.models.enums import Currency, MembershipRole
from app.schemas.base import CamelModel


class RegisterOwnerRequest(CamelModel):
    """Self-service sign-up of an owner with a new organization."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str
    organization_name: str = Field(..., min_length=1, max_length=150)
    industry: Optional[str] = Field(None, max_length=100)
    timezone: Optional[str] = None
    currency: Optional[Currency] = None


class CompleteSetupRequest(CamelModel):
    password: str


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class SetActiveOrganizationRequest(CamelModel):
    organization_id: UUID


class UserSummary(CamelModel):
    id: UUID
    name: str
    email: str
    is_account_active: bool
    is_platform_admin: bool
    active_organization_id: Optional[UUID] = None
    default_organization_id: Optional[UUID] = None
    preferences: dict
    last_login_at: Optional[datetime] = None


class ActiveOrganizationSummary(CamelModel):
    id: UUID
    name: str
    role: MembershipRole
    currency: Currency
    timezone: str


class MembershipSummary(CamelModel):
    organization_id: UUID
    organization_name: str
    role: MembershipRole


class AuthResponse(CamelModel):
    """Returned by register, complete-setup, login, switch and /auth/me."""

    token: Optional[str] = None
    expires_at: Optional[datetime] = None
    user: UserSummary
    active_organization: Optional[ActiveOrganizationSummary] = None
    memberships: List[MembershipSummary] = []

    @classmethod
    def from_result(cls, result) -> "AuthResponse":
        """Build from an AuthResult produced by AuthService."""
        active = None
        if result.organization is not None and result.membership is not None:
            active = ActiveOrganizationSummary(
                id=result.organization.id,
                name=result.organization.name,
                role=result.membership.role,
                currency=result.organization.currency,
                timezone=result.organization.timezone,
            )
        return cls(
            token=result.token,
            expires_at=result.expires_at,
            user=UserSummary.model_validate(result.principal),
            active_organization=active,
            memberships=[
                MembershipSummary(
                    organization_id=organization.id,
                    organization_name=organization.name,
                    role=membership.role,
                )
                for membership, organization in result.memberships
            ],
        )
