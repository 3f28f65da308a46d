"""
Organization Pydantic schemas.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from app.models.enums import Currency, MembershipRole
from app.schemas.base import CamelModel


class OrganizationSettingsUpdate(CamelModel):
    date_format: Optional[str] = None
    financial_year_start_month: Optional[int] = Field(None, ge=1, le=12)
    financial_year_start_day: Optional[int] = Field(None, ge=1, le=31)


class OrganizationUpdate(CamelModel):
    """Fields an owner may change."""

    name: Optional[str] = Field(None, min_length=1, max_length=150)
    industry: Optional[str] = Field(None, max_length=100)
    timezone: Optional[str] = None
    currency: Optional[Currency] = None
    settings: Optional[OrganizationSettingsUpdate] = None

    def to_changes(self) -> dict:
        """Changes keyed by model field; settings keep their stored camelCase keys."""
        changes = self.model_dump(exclude_none=True, exclude={"settings"})
        if self.settings is not None:
            changes["settings"] = self.settings.model_dump(by_alias=True, exclude_none=True)
        return changes


class OrganizationRead(CamelModel):
    id: UUID
    name: str
    industry: Optional[str] = None
    timezone: str
    currency: Currency
    settings: dict
    created_by_id: UUID
    created_at: datetime
    updated_at: datetime


class MyOrganizationResponse(CamelModel):
    organization: OrganizationRead
    role: MembershipRole
