"""
Credential store service.

Owns principals, their password hashes and the two single-use capability
tokens (account setup and password reset).
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.security import (
    generate_capability_token,
    hash_password_async,
    tokens_match,
    verify_password_async,
)
from app.errors import (
    AlreadyActiveError,
    DuplicateEmailError,
    InvalidTokenError,
    SetupIncompleteError,
    UserExistsError,
    ValidationError,
)
from app.models.enums import MembershipStatus
from app.models.principal import Principal
from app.repositories.membership_repository import MembershipRepository
from app.repositories.principal_repository import PrincipalRepository, normalize_email
from app.utils.time import ensure_utc, utc_now

logger = logging.getLogger(__name__)

# Sentinel meaning "leave this reference untouched"
UNCHANGED = object()


@dataclass(frozen=True)
class CapabilityKind:
    """Describes one kind of time-limited single-use token."""

    name: str
    token_field: str
    expires_field: str
    accepts_active_principal: bool
    # Reset of a never-activated principal also activates its pending edges
    activates_pending_memberships: bool = False


SETUP_CAPABILITY = CapabilityKind(
    name="setup",
    token_field="setup_token",
    expires_field="setup_token_expires_at",
    accepts_active_principal=False,
)

RESET_CAPABILITY = CapabilityKind(
    name="reset",
    token_field="reset_token",
    expires_field="reset_token_expires_at",
    accepts_active_principal=True,
    activates_pending_memberships=True,
)


def validate_password(password: Optional[str]) -> str:
    if password is None or len(password) < settings.PASSWORD_MIN_LENGTH:
        raise ValidationError(
            f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters long.",
            details={"field": "password"},
        )
    return password


def validate_name(name: Optional[str]) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Name is required.", details={"field": "name"})
    return cleaned


def validate_email(email: Optional[str]) -> str:
    cleaned = normalize_email(email)
    if not cleaned or "@" not in cleaned:
        raise ValidationError("A valid email is required.", details={"field": "email"})
    return cleaned


class CredentialService:
    """Service for principal credentials."""

    def __init__(self, db: AsyncSession, clock: Callable = utc_now):
        self.repository = PrincipalRepository(db)
        self.memberships = MembershipRepository(db)
        self.clock = clock

    async def get_principal(self, principal_id: UUID) -> Optional[Principal]:
        return await self.repository.get_by_id(principal_id)

    async def create_principal_with_password(self, name: str, email: str, password: str) -> Principal:
        """
        Create an active principal with a password.

        Raises:
            ValidationError: Password shorter than the minimum length
            DuplicateEmailError: Email already registered
        """
        name = validate_name(name)
        email = validate_email(email)
        validate_password(password)

        if await self.repository.get_by_email(email):
            raise DuplicateEmailError()

        password_hash = await hash_password_async(password)
        principal = await self.repository.create(
            name=name,
            email=email,
            password_hash=password_hash,
            is_account_active=True,
        )
        logger.info("Created principal %s", principal.id)
        return principal

    async def create_provisional_principal(self, name: str, email: str) -> Principal:
        """
        Create (or reuse) an inactive principal holding a fresh setup token.

        Raises:
            UserExistsError: An active principal already owns the email
            DuplicateEmailError: An inactive principal owns the email and
                still holds an active or pending membership
        """
        name = validate_name(name)
        email = validate_email(email)

        token = generate_capability_token()
        expires_at = self.clock() + timedelta(days=settings.SETUP_TOKEN_EXPIRE_DAYS)

        principal = await self.repository.get_by_email(email)
        if principal is not None:
            if principal.is_account_active:
                raise UserExistsError()
            if await self.memberships.has_live_membership(principal.id):
                raise DuplicateEmailError(
                    "This email is already pending setup in another organization."
                )
            principal.name = name
            principal.setup_token = token
            principal.setup_token_expires_at = expires_at
            await self.repository.save(principal)
            logger.info("Reissued setup token for provisional principal %s", principal.id)
            return principal

        principal = await self.repository.create(
            name=name,
            email=email,
            password_hash=None,
            is_account_active=False,
            setup_token=token,
            setup_token_expires_at=expires_at,
        )
        logger.info("Created provisional principal %s", principal.id)
        return principal

    async def verify_password(self, email: str, password: str) -> Optional[Principal]:
        """
        Check an email/password pair.

        Returns:
            The principal when it exists, is active and the password matches;
            None otherwise. Unknown emails cost the same bcrypt work.

        Raises:
            SetupIncompleteError: The principal exists but was never activated
        """
        principal = await self.repository.get_by_email(email)
        if principal is None:
            await verify_password_async(password or "", None)
            return None

        if not principal.is_account_active:
            await verify_password_async(password or "", None)
            raise SetupIncompleteError()

        if not await verify_password_async(password or "", principal.password_hash):
            return None
        return principal

    async def consume_setup_token(self, token: str, password: str) -> Principal:
        """
        Activate a provisional principal.

        Raises:
            ValidationError: Password too short
            InvalidTokenError: Unknown or expired token (400)
            AlreadyActiveError: Principal is already active
        """
        return await self._consume_capability(SETUP_CAPABILITY, token, password)

    async def issue_reset_token(self, email: str) -> Optional[Principal]:
        """Attach a reset token to an existing principal; None for unknown emails."""
        principal = await self.repository.get_by_email(email)
        if principal is None:
            return None
        principal.reset_token = generate_capability_token()
        principal.reset_token_expires_at = self.clock() + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
        await self.repository.save(principal)
        logger.info("Issued reset token for principal %s", principal.id)
        return principal

    async def consume_reset_token(self, token: str, password: str) -> Principal:
        """Set a new password from a reset token; activates the principal and its pending memberships if needed."""
        return await self._consume_capability(RESET_CAPABILITY, token, password)

    async def _consume_capability(self, kind: CapabilityKind, token: str, password: str) -> Principal:
        validate_password(password)

        principal = await self.repository.get_by_capability_token(kind.token_field, token)

        invalid = InvalidTokenError(
            f"Invalid or expired {kind.name} token.",
            status_code=400,
        )
        if principal is None or not tokens_match(getattr(principal, kind.token_field), token):
            raise invalid

        expires_at = ensure_utc(getattr(principal, kind.expires_field))
        if expires_at is None or self.clock() >= expires_at:
            raise invalid

        if principal.is_account_active and not kind.accepts_active_principal:
            raise AlreadyActiveError()

        was_active = principal.is_account_active
        principal.password_hash = await hash_password_async(password)
        principal.is_account_active = True
        setattr(principal, kind.token_field, None)
        setattr(principal, kind.expires_field, None)
        # An activated account has no use for an outstanding setup token
        principal.setup_token = None
        principal.setup_token_expires_at = None
        await self.repository.save(principal)
        if not was_active and kind.activates_pending_memberships:
            await self._activate_pending_memberships(principal)
        logger.info("Consumed %s token for principal %s", kind.name, principal.id)
        return principal

    async def _activate_pending_memberships(self, principal: Principal) -> None:
        """Promote pending edges of a newly active principal and point its references at the newest."""
        pending = await self.memberships.list_pending_for_principal(principal.id)
        if not pending:
            return
        for membership in pending:
            membership.status = MembershipStatus.ACTIVE
            await self.memberships.save(membership)
        newest = max(pending, key=lambda m: m.created_at)
        await self.set_organization_references(
            principal,
            active=principal.active_organization_id or newest.organization_id,
            default=principal.default_organization_id or newest.organization_id,
        )
        logger.info("Activated %d pending membership(s) for principal %s", len(pending), principal.id)

    async def record_login(self, principal: Principal) -> None:
        principal.last_login_at = self.clock()
        await self.repository.save(principal)

    async def set_organization_references(
        self,
        principal: Principal,
        active=UNCHANGED,
        default=UNCHANGED,
    ) -> Principal:
        """Update the weak active/default organization references."""
        if active is not UNCHANGED:
            principal.active_organization_id = active
        if default is not UNCHANGED:
            principal.default_organization_id = default
        await self.repository.save(principal)
        return principal
