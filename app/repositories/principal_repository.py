"""
Principal repository - database operations for Principal.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import DuplicateEmailError
from app.models.principal import Principal


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class PrincipalRepository:
    """Repository for Principal database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, principal_id: UUID) -> Optional[Principal]:
        """Get a principal by ID."""
        result = await self.db.execute(
            select(Principal).where(Principal.id == principal_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[Principal]:
        """Get a principal by email (case-insensitive)."""
        email_clean = normalize_email(email)
        if not email_clean:
            return None
        result = await self.db.execute(
            select(Principal).where(Principal.email == email_clean)
        )
        return result.scalar_one_or_none()

    async def get_by_capability_token(self, field: str, token: str) -> Optional[Principal]:
        """Look up a principal by its setup_token or reset_token column."""
        if not token or field not in ("setup_token", "reset_token"):
            return None
        column = getattr(Principal, field)
        result = await self.db.execute(
            select(Principal).where(column == token)
        )
        return result.scalar_one_or_none()

    async def create(self, **values) -> Principal:
        """
        Insert a principal.

        Raises:
            DuplicateEmailError: The unique email index rejected the row
        """
        values["email"] = normalize_email(values["email"])
        principal = Principal(**values)
        self.db.add(principal)
        try:
            await self.db.flush()
        except IntegrityError:
            raise DuplicateEmailError()
        return principal

    async def save(self, principal: Principal) -> Principal:
        await self.db.flush()
        return principal
