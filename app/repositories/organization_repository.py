"""
Organization repository - database operations for Organization.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import MembershipRole, MembershipStatus
from app.models.membership import Membership
from app.models.organization import Organization


class OrganizationRepository:
    """Repository for Organization database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, organization_id: UUID) -> Optional[Organization]:
        result = await self.db.execute(
            select(Organization).where(Organization.id == organization_id)
        )
        return result.scalar_one_or_none()

    async def lock_for_update(self, organization_id: UUID) -> Optional[Organization]:
        """
        Load the organization row with SELECT ... FOR UPDATE.

        Serializes membership mutations of one organization until the
        surrounding transaction ends. SQLite ignores the lock clause.
        """
        result = await self.db.execute(
            select(Organization)
            .where(Organization.id == organization_id)
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def create(self, **values) -> Organization:
        organization = Organization(**values)
        self.db.add(organization)
        await self.db.flush()
        return organization

    async def save(self, organization: Organization) -> Organization:
        await self.db.flush()
        return organization

    async def list_without_active_owner(self) -> List[Organization]:
        """Organizations that have memberships but no active owner."""
        has_members = exists().where(Membership.organization_id == Organization.id)
        has_owner = exists().where(
            and_(
                Membership.organization_id == Organization.id,
                Membership.role == MembershipRole.OWNER,
                Membership.status == MembershipStatus.ACTIVE,
            )
        )
        result = await self.db.execute(
            select(Organization)
            .where(has_members, ~has_owner)
            .order_by(Organization.created_at.asc())
        )
        return list(result.scalars().all())
