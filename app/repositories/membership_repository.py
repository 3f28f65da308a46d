"""
Membership repository - database operations for Membership.
"""

from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import MembershipRole, MembershipStatus
from app.models.membership import Membership
from app.models.organization import Organization
from app.models.principal import Principal


class MembershipRepository:
    """Repository for Membership database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, principal_id: UUID, organization_id: UUID) -> Optional[Membership]:
        """The (principal, organization) edge in any status."""
        result = await self.db.execute(
            select(Membership).where(
                Membership.principal_id == principal_id,
                Membership.organization_id == organization_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_active(self, principal_id: UUID, organization_id: UUID) -> Optional[Membership]:
        result = await self.db.execute(
            select(Membership).where(
                Membership.principal_id == principal_id,
                Membership.organization_id == organization_id,
                Membership.status == MembershipStatus.ACTIVE,
            )
        )
        return result.scalar_one_or_none()

    async def list_pending_for_principal(self, principal_id: UUID) -> List[Membership]:
        result = await self.db.execute(
            select(Membership).where(
                Membership.principal_id == principal_id,
                Membership.status == MembershipStatus.PENDING_USER_SETUP,
            )
        )
        return list(result.scalars().all())

    async def list_active_for_principal(self, principal_id: UUID) -> List[Tuple[Membership, Organization]]:
        """Active memberships with their organization, newest first."""
        result = await self.db.execute(
            select(Membership, Organization)
            .join(Organization, Organization.id == Membership.organization_id)
            .where(
                Membership.principal_id == principal_id,
                Membership.status == MembershipStatus.ACTIVE,
            )
            .order_by(Membership.created_at.desc())
        )
        return [(membership, organization) for membership, organization in result.all()]

    async def list_for_organization(self, organization_id: UUID) -> List[Tuple[Membership, Principal]]:
        """All memberships of an organization with principal rows, newest first."""
        result = await self.db.execute(
            select(Membership, Principal)
            .join(Principal, Principal.id == Membership.principal_id)
            .where(Membership.organization_id == organization_id)
            .order_by(Membership.created_at.desc())
        )
        return [(membership, principal) for membership, principal in result.all()]

    async def has_live_membership(self, principal_id: UUID) -> bool:
        """True if the principal holds an active or pending membership anywhere."""
        result = await self.db.execute(
            select(func.count(Membership.id)).where(
                Membership.principal_id == principal_id,
                Membership.status.in_([MembershipStatus.ACTIVE, MembershipStatus.PENDING_USER_SETUP]),
            )
        )
        return (result.scalar_one() or 0) > 0

    async def count_active_owners(self, organization_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count(Membership.id)).where(
                Membership.organization_id == organization_id,
                Membership.role == MembershipRole.OWNER,
                Membership.status == MembershipStatus.ACTIVE,
            )
        )
        return result.scalar_one() or 0

    async def create(self, **values) -> Membership:
        membership = Membership(**values)
        self.db.add(membership)
        await self.db.flush()
        return membership

    async def save(self, membership: Membership) -> Membership:
        await self.db.flush()
        return membership

    async def delete(self, membership: Membership) -> None:
        await self.db.delete(membership)
        await self.db.flush()
