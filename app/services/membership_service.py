"""
Membership registry service.

Every mutating operation names the acting principal and the target
organization; authorization always goes through can_act_as().
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.permissions import can_act_as
from app.errors import (
    InsufficientRoleError,
    InvalidTokenError,
    NotFoundError,
    SoleOwnerViolationError,
)
from app.models.enums import MembershipRole, MembershipStatus
from app.models.membership import Membership
from app.models.organization import Organization
from app.models.principal import Principal
from app.repositories.membership_repository import MembershipRepository
from app.repositories.organization_repository import OrganizationRepository
from app.services.credential_service import CredentialService

logger = logging.getLogger(__name__)


@dataclass
class ProvisionResult:
    principal: Principal
    membership: Membership
    setup_token: str


class MembershipService:
    """Service for membership business logic."""

    def __init__(self, db: AsyncSession, credentials: Optional[CredentialService] = None):
        self.repository = MembershipRepository(db)
        self.organizations = OrganizationRepository(db)
        self.credentials = credentials or CredentialService(db)

    async def _require(self, actor_id: UUID, organization_id: UUID, role: MembershipRole) -> Membership:
        membership = await self.repository.get_active(actor_id, organization_id)
        if not can_act_as(membership, role):
            raise InsufficientRoleError()
        return membership

    async def _lock_organization(self, organization_id: UUID) -> Organization:
        organization = await self.organizations.lock_for_update(organization_id)
        if organization is None:
            raise NotFoundError("Organization not found.")
        return organization

    async def get_active(self, principal_id: UUID, organization_id: UUID) -> Optional[Membership]:
        return await self.repository.get_active(principal_id, organization_id)

    async def create_owner_membership(self, principal_id: UUID, organization_id: UUID) -> Membership:
        """First membership of a freshly registered organization."""
        return await self.repository.create(
            principal_id=principal_id,
            organization_id=organization_id,
            role=MembershipRole.OWNER,
            status=MembershipStatus.ACTIVE,
            invited_by_id=principal_id,
        )

    async def list_for_organization(self, actor_id: UUID, organization_id: UUID) -> List[Tuple[Membership, Principal]]:
        """All memberships of an organization, newest first. Any active member may list."""
        await self._require(actor_id, organization_id, MembershipRole.MEMBER)
        return await self.repository.list_for_organization(organization_id)

    async def list_for_principal(self, actor_id: UUID, principal_id: UUID) -> List[Tuple[Membership, Organization]]:
        """A principal's active memberships; principals only see their own."""
        if actor_id != principal_id:
            raise InsufficientRoleError("You can only list your own memberships.")
        return await self.repository.list_active_for_principal(principal_id)

    async def provision(
        self,
        actor_id: UUID,
        organization_id: UUID,
        email: str,
        name: str,
        role: MembershipRole = MembershipRole.MEMBER,
    ) -> ProvisionResult:
        """
        Provision a principal into an organization, pending account setup.

        Raises:
            InsufficientRoleError: Actor is not an active owner of the organization
            UserExistsError: Email belongs to an active principal
            DuplicateEmailError: Email is already pending elsewhere
        """
        await self._require(actor_id, organization_id, MembershipRole.OWNER)
        role = MembershipRole(role)

        principal = await self.credentials.create_provisional_principal(name=name, email=email)

        membership = await self.repository.get(principal.id, organization_id)
        if membership is not None:
            # Only an inactive edge can survive the checks above
            membership.role = role
            membership.status = MembershipStatus.PENDING_USER_SETUP
            membership.invited_by_id = actor_id
            await self.repository.save(membership)
        else:
            membership = await self.repository.create(
                principal_id=principal.id,
                organization_id=organization_id,
                role=role,
                status=MembershipStatus.PENDING_USER_SETUP,
                invited_by_id=actor_id,
            )

        logger.info(
            "Provisioned principal %s into organization %s as %s",
            principal.id,
            organization_id,
            role.value,
        )
        return ProvisionResult(principal=principal, membership=membership, setup_token=principal.setup_token)

    async def activate_pending(self, principal_id: UUID) -> Membership:
        """
        Turn the principal's pending membership into an active one.

        Raises:
            InvalidTokenError: No pending membership exists (400)
        """
        pending = await self.repository.list_pending_for_principal(principal_id)
        if not pending:
            raise InvalidTokenError(
                "No pending organization membership found for this account.",
                status_code=400,
            )
        if len(pending) > 1:
            logger.warning("Principal %s has %d pending memberships", principal_id, len(pending))
        membership = max(pending, key=lambda m: m.created_at)
        membership.status = MembershipStatus.ACTIVE
        await self.repository.save(membership)
        return membership

    async def change_role(
        self,
        actor_id: UUID,
        organization_id: UUID,
        target_principal_id: UUID,
        new_role: MembershipRole,
    ) -> Membership:
        """
        Change a member's role.

        Raises:
            InsufficientRoleError: Actor is not an active owner
            NotFoundError: Target is not a member of the organization
            SoleOwnerViolationError: Would demote the last active owner
        """
        await self._lock_organization(organization_id)
        await self._require(actor_id, organization_id, MembershipRole.OWNER)
        new_role = MembershipRole(new_role)

        membership = await self.repository.get(target_principal_id, organization_id)
        if membership is None:
            raise NotFoundError("Member not found in this organization.")

        if (
            membership.role == MembershipRole.OWNER
            and membership.status == MembershipStatus.ACTIVE
            and new_role != MembershipRole.OWNER
            and await self.repository.count_active_owners(organization_id) <= 1
        ):
            raise SoleOwnerViolationError()

        membership.role = new_role
        await self.repository.save(membership)
        logger.info(
            "Principal %s set role of %s in organization %s to %s",
            actor_id,
            target_principal_id,
            organization_id,
            new_role.value,
        )
        return membership

    async def remove(self, actor_id: UUID, organization_id: UUID, target_principal_id: UUID) -> Membership:
        """
        Remove a member from an organization.

        The removed principal's organization references are repaired and a
        now-unusable setup token is cleared.

        Raises:
            InsufficientRoleError: Actor is not an active owner
            NotFoundError: Target is not a member of the organization
            SoleOwnerViolationError: Would remove the last active owner
        """
        await self._lock_organization(organization_id)
        await self._require(actor_id, organization_id, MembershipRole.OWNER)

        membership = await self.repository.get(target_principal_id, organization_id)
        if membership is None:
            raise NotFoundError("Member not found in this organization.")

        if (
            membership.role == MembershipRole.OWNER
            and membership.status == MembershipStatus.ACTIVE
            and await self.repository.count_active_owners(organization_id) <= 1
        ):
            raise SoleOwnerViolationError()

        was_pending = membership.status == MembershipStatus.PENDING_USER_SETUP
        await self.repository.delete(membership)

        principal = await self.credentials.get_principal(target_principal_id)
        if principal is not None:
            await self._repair_references(principal, organization_id)
            if was_pending and not await self.repository.list_pending_for_principal(principal.id):
                principal.setup_token = None
                principal.setup_token_expires_at = None
                await self.credentials.repository.save(principal)

        logger.info(
            "Principal %s removed %s from organization %s",
            actor_id,
            target_principal_id,
            organization_id,
        )
        return membership

    async def _repair_references(self, principal: Principal, removed_organization_id: UUID) -> None:
        points_active = principal.active_organization_id == removed_organization_id
        points_default = principal.default_organization_id == removed_organization_id
        if not points_active and not points_default:
            return

        remaining = [org.id for _, org in await self.repository.list_active_for_principal(principal.id)]
        replacement = None
        if principal.default_organization_id in remaining:
            replacement = principal.default_organization_id
        elif remaining:
            replacement = remaining[0]

        changes = {}
        if points_active:
            changes["active"] = replacement
        if points_default:
            changes["default"] = replacement
        await self.credentials.set_organization_references(principal, **changes)

    async def find_ownerless_organizations(self) -> List[Organization]:
        """Audit: organizations with memberships but no active owner."""
        return await self.organizations.list_without_active_owner()
