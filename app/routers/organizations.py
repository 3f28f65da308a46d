"""
Organization router - the caller's active organization and its members.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.dependencies import OrganizationContext, get_db, require_roles
from app.models.enums import MembershipRole
from app.schemas.membership import (
    MemberRead,
    MemberRemovedResponse,
    MembershipRead,
    ProvisionRequest,
    ProvisionResponse,
    RoleChangeRequest,
)
from app.schemas.organization import MyOrganizationResponse, OrganizationRead, OrganizationUpdate
from app.services.auth_service import AuthService
from app.services.membership_service import MembershipService
from app.services.organization_service import OrganizationService

router = APIRouter(prefix="/organizations", tags=["organizations"])

ANY_MEMBER = (MembershipRole.OWNER, MembershipRole.MEMBER)


@router.get("/my", response_model=MyOrganizationResponse)
async def get_my_organization(
    context: OrganizationContext = Depends(require_roles(*ANY_MEMBER)),
):
    """The active organization and the caller's role in it."""
    return MyOrganizationResponse(
        organization=OrganizationRead.model_validate(context.organization),
        role=context.role,
    )


@router.put("/my", response_model=OrganizationRead)
async def update_my_organization(
    data: OrganizationUpdate,
    context: OrganizationContext = Depends(require_roles(MembershipRole.OWNER)),
    db: AsyncSession = Depends(get_db),
):
    """Update name, industry, timezone, currency or settings (owners only)."""
    service = OrganizationService(db)
    organization = await service.update(context.organization, data.to_changes())
    await db.commit()
    return organization


@router.get("/my/members", response_model=List[MemberRead])
async def list_members(
    context: OrganizationContext = Depends(require_roles(*ANY_MEMBER)),
    db: AsyncSession = Depends(get_db),
):
    """All memberships of the active organization, newest first."""
    service = MembershipService(db)
    rows = await service.list_for_organization(context.principal_id, context.organization_id)
    return [MemberRead.from_row(membership, principal) for membership, principal in rows]


@router.post("/my/members/provision", response_model=ProvisionResponse, status_code=status.HTTP_201_CREATED)
async def provision_member(
    data: ProvisionRequest,
    context: OrganizationContext = Depends(require_roles(MembershipRole.OWNER)),
    db: AsyncSession = Depends(get_db),
):
    """
    Provision a new member (owners only).

    The response carries the setup token and link to hand to the new member.
    """
    service = AuthService(db)
    outcome = await service.provision_member(
        actor_id=context.principal_id,
        organization_id=context.organization_id,
        email=data.email,
        name=data.name,
        role=data.role,
    )
    await db.commit()
    result = outcome.result
    return ProvisionResponse(
        user_id=result.principal.id,
        membership_id=result.membership.id,
        email=result.principal.email,
        name=result.principal.name,
        role=result.membership.role,
        status=result.membership.status,
        setup_token=result.setup_token,
        setup_link=outcome.setup_link,
        instructions=(
            f"Share this link with {result.principal.name} to complete their account setup. "
            f"The link expires in {settings.SETUP_TOKEN_EXPIRE_DAYS} days."
        ),
    )


@router.put("/my/members/{principal_id}/role", response_model=MembershipRead)
async def change_member_role(
    principal_id: UUID,
    data: RoleChangeRequest,
    context: OrganizationContext = Depends(require_roles(MembershipRole.OWNER)),
    db: AsyncSession = Depends(get_db),
):
    """Promote or demote a member (owners only)."""
    service = MembershipService(db)
    membership = await service.change_role(
        context.principal_id,
        context.organization_id,
        principal_id,
        data.new_role,
    )
    await db.commit()
    return membership


@router.delete("/my/members/{principal_id}", response_model=MemberRemovedResponse)
async def remove_member(
    principal_id: UUID,
    context: OrganizationContext = Depends(require_roles(MembershipRole.OWNER)),
    db: AsyncSession = Depends(get_db),
):
    """Remove a member from the organization (owners only)."""
    service = MembershipService(db)
    await service.remove(context.principal_id, context.organization_id, principal_id)
    await db.commit()
    return MemberRemovedResponse(message="Member removed from organization.", principal_id=principal_id)
