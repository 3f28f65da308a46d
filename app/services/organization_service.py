"""
Organization registry service.
"""

import logging
from typing import Any, Dict, Optional
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFoundError, ValidationError
from app.models.enums import Currency
from app.models.organization import DEFAULT_TIMEZONE, Organization, default_settings
from app.repositories.organization_repository import OrganizationRepository

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 150
INDUSTRY_MAX_LENGTH = 100
DATE_FORMATS = {"YYYY-MM-DD", "DD-MM-YYYY", "MM-DD-YYYY", "DD/MM/YYYY", "MM/DD/YYYY"}

# Fields an owner may change through update()
UPDATABLE_FIELDS = ("name", "industry", "timezone", "currency", "settings")


def validate_organization_name(name: Optional[str]) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Organization name is required.", details={"field": "name"})
    if len(cleaned) > NAME_MAX_LENGTH:
        raise ValidationError(
            f"Organization name cannot exceed {NAME_MAX_LENGTH} characters.",
            details={"field": "name"},
        )
    return cleaned


def validate_industry(industry: Optional[str]) -> Optional[str]:
    if industry is None:
        return None
    cleaned = industry.strip()
    if len(cleaned) > INDUSTRY_MAX_LENGTH:
        raise ValidationError(
            f"Industry cannot exceed {INDUSTRY_MAX_LENGTH} characters.",
            details={"field": "industry"},
        )
    return cleaned or None


def validate_timezone(timezone: str) -> str:
    try:
        ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        # OSError covers zone directories such as "America" and over-long names
        raise ValidationError(f"Unknown timezone: {timezone}", details={"field": "timezone"})
    return timezone


def validate_currency(currency) -> Currency:
    try:
        return Currency(currency)
    except ValueError:
        raise ValidationError(
            f"Currency must be one of: {', '.join(c.value for c in Currency)}",
            details={"field": "currency"},
        )


def merge_settings(current: Optional[Dict[str, Any]], changes: Dict[str, Any]) -> Dict[str, Any]:
    """Merge settings key by key over the current values and validate the result."""
    merged = dict(default_settings())
    merged.update(current or {})
    for key, value in (changes or {}).items():
        if value is not None:
            merged[key] = value

    if merged["dateFormat"] not in DATE_FORMATS:
        raise ValidationError("Unsupported date format.", details={"field": "settings.dateFormat"})
    month = merged["financialYearStartMonth"]
    if not isinstance(month, int) or not 1 <= month <= 12:
        raise ValidationError(
            "Financial year start month must be between 1 and 12.",
            details={"field": "settings.financialYearStartMonth"},
        )
    day = merged["financialYearStartDay"]
    if not isinstance(day, int) or not 1 <= day <= 31:
        raise ValidationError(
            "Financial year start day must be between 1 and 31.",
            details={"field": "settings.financialYearStartDay"},
        )
    return merged


class OrganizationService:
    """Service for organization business logic."""

    def __init__(self, db: AsyncSession):
        self.repository = OrganizationRepository(db)

    async def create(
        self,
        name: str,
        creator_id: UUID,
        industry: Optional[str] = None,
        timezone: str = DEFAULT_TIMEZONE,
        currency=Currency.INR,
    ) -> Organization:
        organization = await self.repository.create(
            name=validate_organization_name(name),
            created_by_id=creator_id,
            industry=validate_industry(industry),
            timezone=validate_timezone(timezone),
            currency=validate_currency(currency),
            settings=default_settings(),
        )
        logger.info("Created organization %s", organization.id)
        return organization

    async def get(self, organization_id: UUID) -> Organization:
        """
        Raises:
            NotFoundError: No such organization
        """
        organization = await self.repository.get_by_id(organization_id)
        if organization is None:
            raise NotFoundError("Organization not found.")
        return organization

    async def update(self, organization: Organization, changes: Dict[str, Any]) -> Organization:
        """
        Apply owner-supplied changes.

        Only name, industry, timezone, currency and settings are considered;
        None values are ignored.
        """
        for field in UPDATABLE_FIELDS:
            value = changes.get(field)
            if value is None:
                continue
            if field == "name":
                organization.name = validate_organization_name(value)
            elif field == "industry":
                organization.industry = validate_industry(value)
            elif field == "timezone":
                organization.timezone = validate_timezone(value)
            elif field == "currency":
                organization.currency = validate_currency(value)
            elif field == "settings":
                organization.settings = merge_settings(organization.settings, value)
        await self.repository.save(organization)
        logger.info("Updated organization %s", organization.id)
        return organization

