"""
Authentication service for registration, setup, login and organization switching.

Each flow runs inside the caller's database transaction and ends by minting
a fresh session token for the resulting (principal, organization) pair.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.jwt import SessionTokenService, session_tokens
from app.errors import NotFoundError, UnauthenticatedError
from app.models.enums import Currency, MembershipRole
from app.models.membership import Membership
from app.models.organization import DEFAULT_TIMEZONE, Organization
from app.models.principal import Principal
from app.services.credential_service import CredentialService
from app.services.membership_service import MembershipService, ProvisionResult
from app.services.organization_service import OrganizationService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password."


def build_setup_link(token: str) -> str:
    return f"{settings.FRONTEND_URL}/complete-setup/{token}"


@dataclass
class AuthResult:
    """Outcome of an authentication flow."""

    principal: Principal
    organization: Optional[Organization] = None
    membership: Optional[Membership] = None
    memberships: List[Tuple[Membership, Organization]] = field(default_factory=list)
    token: Optional[str] = None
    expires_at: Optional[datetime] = None


@dataclass
class ProvisionOutcome:
    result: ProvisionResult
    setup_link: str


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: AsyncSession, tokens: Optional[SessionTokenService] = None):
        self.credentials = CredentialService(db)
        self.organizations = OrganizationService(db)
        self.memberships = MembershipService(db, credentials=self.credentials)
        self.tokens = tokens or session_tokens

    async def _result(
        self,
        principal: Principal,
        organization: Optional[Organization],
        membership: Optional[Membership],
        with_token: bool = True,
    ) -> AuthResult:
        memberships = await self.memberships.repository.list_active_for_principal(principal.id)
        result = AuthResult(
            principal=principal,
            organization=organization,
            membership=membership,
            memberships=memberships,
        )
        if with_token:
            token, claims = self.tokens.mint(
                principal.id,
                organization.id if organization is not None else None,
            )
            result.token = token
            result.expires_at = claims.expires_at
        return result

    async def register_owner(
        self,
        name: str,
        email: str,
        password: str,
        organization_name: str,
        industry: Optional[str] = None,
        timezone: Optional[str] = None,
        currency: Optional[Currency] = None,
    ) -> AuthResult:
        """
        Self-service sign-up: principal, organization and owner membership.

        Any failure propagates and the caller's transaction is rolled back,
        so no partial state survives.
        """
        principal = await self.credentials.create_principal_with_password(name, email, password)
        organization = await self.organizations.create(
            name=organization_name,
            creator_id=principal.id,
            industry=industry,
            timezone=timezone or DEFAULT_TIMEZONE,
            currency=currency or Currency.INR,
        )
        membership = await self.memberships.create_owner_membership(principal.id, organization.id)
        await self.credentials.set_organization_references(
            principal,
            active=organization.id,
            default=organization.id,
        )
        await self.credentials.record_login(principal)
        logger.info("Registered owner %s with organization %s", principal.id, organization.id)
        return await self._result(principal, organization, membership)

    async def provision_member(
        self,
        actor_id: UUID,
        organization_id: UUID,
        email: str,
        name: str,
        role: MembershipRole = MembershipRole.MEMBER,
    ) -> ProvisionOutcome:
        result = await self.memberships.provision(actor_id, organization_id, email, name, role)
        return ProvisionOutcome(result=result, setup_link=build_setup_link(result.setup_token))

    async def complete_setup(self, token: str, password: str) -> AuthResult:
        """
        Consume a setup token, activate the pending membership and log in.

        Raises:
            InvalidTokenError: Token unknown/expired or nothing pending (400)
            AlreadyActiveError: Account already set up
        """
        principal = await self.credentials.consume_setup_token(token, password)
        membership = await self.memberships.activate_pending(principal.id)
        await self.credentials.set_organization_references(
            principal,
            active=membership.organization_id,
            default=membership.organization_id,
        )
        await self.credentials.record_login(principal)
        organization = await self.organizations.get(membership.organization_id)
        logger.info("Principal %s completed setup", principal.id)
        return await self._result(principal, organization, membership)

    async def login(self, email: str, password: str) -> AuthResult:
        """
        Authenticate with email and password.

        The active organization is the persisted active reference if still
        valid, else the default reference, else the newest membership.

        Raises:
            UnauthenticatedError: Unknown email or wrong password
            SetupIncompleteError: Account not yet activated
        """
        principal = await self.credentials.verify_password(email, password)
        if principal is None:
            logger.info("Failed login attempt")
            raise UnauthenticatedError(INVALID_CREDENTIALS_MESSAGE)

        active = await self.memberships.repository.list_active_for_principal(principal.id)
        by_org = {organization.id: (membership, organization) for membership, organization in active}

        chosen: Optional[Tuple[Membership, Organization]] = None
        if principal.active_organization_id in by_org:
            chosen = by_org[principal.active_organization_id]
        elif principal.default_organization_id in by_org:
            chosen = by_org[principal.default_organization_id]
        elif active:
            chosen = active[0]

        chosen_id = chosen[1].id if chosen else None
        if chosen_id != principal.active_organization_id:
            await self.credentials.set_organization_references(principal, active=chosen_id)

        await self.credentials.record_login(principal)
        membership, organization = chosen if chosen else (None, None)
        return await self._result(principal, organization, membership)

    async def switch_active_organization(self, principal: Principal, organization_id: UUID) -> AuthResult:
        """
        Make another organization active for the principal.

        Tokens minted earlier stay valid until they expire.

        Raises:
            NotFoundError: Principal has no active membership there
        """
        membership = await self.memberships.get_active(principal.id, organization_id)
        if membership is None:
            raise NotFoundError("Organization not found or you are not an active member.")
        organization = await self.organizations.get(organization_id)
        await self.credentials.set_organization_references(principal, active=organization_id)
        logger.info("Principal %s switched to organization %s", principal.id, organization_id)
        return await self._result(principal, organization, membership)

    async def describe_principal(
        self,
        principal: Principal,
        organization: Optional[Organization],
        membership: Optional[Membership],
    ) -> AuthResult:
        """Profile of the authenticated principal, without a new token."""
        return await self._result(principal, organization, membership, with_token=False)
