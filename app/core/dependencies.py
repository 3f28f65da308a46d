"""
FastAPI dependencies for the application.

RequestContextResolver turns a bearer token into an immutable RequestContext.
The gates (require_active_organization, require_role) are plain functions
over that value; get_organization_context and require_roles wrap them for
use with Depends().
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.jwt import session_tokens
from app.core.permissions import role_satisfies
from app.db.session import get_db
from app.errors import (
    InsufficientRoleError,
    OrgContextRequiredError,
    SetupIncompleteError,
    UnauthenticatedError,
)
from app.models.enums import MembershipRole
from app.models.membership import Membership
from app.models.organization import Organization
from app.models.principal import Principal
from app.repositories.membership_repository import MembershipRepository
from app.repositories.organization_repository import OrganizationRepository
from app.repositories.principal_repository import PrincipalRepository

logger = logging.getLogger(__name__)

# Security scheme for JWT bearer tokens; missing headers are handled below
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class RequestContext:
    """Who is calling, and in which organization (if any)."""

    principal: Principal
    organization: Optional[Organization] = None
    role: Optional[MembershipRole] = None
    membership: Optional[Membership] = None

    @property
    def principal_id(self):
        return self.principal.id

    @property
    def has_organization(self) -> bool:
        return self.organization is not None and self.membership is not None


@dataclass(frozen=True)
class OrganizationContext:
    """A RequestContext that passed the active-organization gate."""

    principal: Principal
    organization: Organization
    role: MembershipRole
    membership: Membership

    @property
    def principal_id(self):
        return self.principal.id

    @property
    def organization_id(self):
        return self.organization.id


class RequestContextResolver:
    """
    Resolve the bearer token of a request into a RequestContext.

    Args:
        allow_inactive: Let principals that haven't completed setup through
            (only the profile endpoint does this)
    """

    def __init__(self, allow_inactive: bool = False):
        self.allow_inactive = allow_inactive

    async def __call__(
        self,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
        db: AsyncSession = Depends(get_db),
    ) -> RequestContext:
        if credentials is None or not credentials.credentials:
            raise UnauthenticatedError("Not authorized, no token provided.")

        claims = session_tokens.verify(credentials.credentials)

        principal = await PrincipalRepository(db).get_by_id(claims.principal_id)
        if principal is None:
            raise UnauthenticatedError("Not authorized, user not found.")

        if not principal.is_account_active and not self.allow_inactive:
            raise SetupIncompleteError()

        if claims.organization_id is None:
            return RequestContext(principal=principal)

        membership = await MembershipRepository(db).get_active(principal.id, claims.organization_id)
        if membership is None:
            logger.warning(
                "Principal %s presented organization %s without an active membership",
                principal.id,
                claims.organization_id,
            )
            return RequestContext(principal=principal)

        organization = await OrganizationRepository(db).get_by_id(claims.organization_id)
        if organization is None:
            logger.warning("Organization %s in token no longer exists", claims.organization_id)
            return RequestContext(principal=principal)

        return RequestContext(
            principal=principal,
            organization=organization,
            role=membership.role,
            membership=membership,
        )


get_request_context = RequestContextResolver()
get_request_context_allow_inactive = RequestContextResolver(allow_inactive=True)


def require_active_organization(context: RequestContext) -> OrganizationContext:
    """
    Raises:
        OrgContextRequiredError: No active organization on the context
    """
    if not context.has_organization or context.role is None:
        raise OrgContextRequiredError()
    return OrganizationContext(
        principal=context.principal,
        organization=context.organization,
        role=context.role,
        membership=context.membership,
    )


def require_role(context: RequestContext, allowed_roles) -> OrganizationContext:
    """
    Raises:
        OrgContextRequiredError: No active organization on the context
        InsufficientRoleError: Role is not one of the allowed roles
    """
    org_context = require_active_organization(context)
    if not role_satisfies(org_context.role, allowed_roles):
        allowed = ", ".join(MembershipRole(r).value for r in allowed_roles)
        raise InsufficientRoleError(
            f"Your role '{org_context.role.value}' is not authorized. Required: {allowed}."
        )
    return org_context


async def get_organization_context(
    context: RequestContext = Depends(get_request_context),
) -> OrganizationContext:
    """Dependency: an authenticated principal with an active organization."""
    return require_active_organization(context)


def require_roles(*allowed_roles: MembershipRole):
    """
    Dependency factory to require specific roles in the active organization.

    Usage:
        @router.put("/my")
        async def update(ctx: OrganizationContext = Depends(require_roles(MembershipRole.OWNER))):
            ...
    """
    async def check_role(context: RequestContext = Depends(get_request_context)) -> OrganizationContext:
        return require_role(context, allowed_roles)

    return check_role
