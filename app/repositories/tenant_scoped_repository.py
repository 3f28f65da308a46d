"""
Tenant-scoped repository - the one gateway to organization-owned tables.

A repository instance is bound to a single organization id. Every statement
it issues carries `organization_id = <bound id>`; callers cannot opt out.
"""

from typing import Any, Generic, List, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base_model import TenantScopedModel

ModelT = TypeVar("ModelT", bound=TenantScopedModel)

# Columns a caller can never set through create()/update()
PROTECTED_FIELDS = {"id", "organization_id", "created_at", "updated_at"}


class TenantScopedRepository(Generic[ModelT]):
    """Generic CRUD for a TenantScopedModel, confined to one organization."""

    model: Type[ModelT]

    def __init__(self, db: AsyncSession, organization_id: UUID, model: Optional[Type[ModelT]] = None):
        if organization_id is None:
            raise ValueError("organization_id is required for tenant-scoped access")
        self.db = db
        self.organization_id = organization_id
        if model is not None:
            self.model = model

    def _scope(self):
        return self.model.organization_id == self.organization_id

    def scoped(self, statement: Select) -> Select:
        """
        Apply the organization predicate to an arbitrary select.

        Use for aggregates: the predicate becomes part of the WHERE clause
        before any grouping.
        """
        return statement.where(self._scope())

    async def create(self, **values: Any) -> ModelT:
        """Insert a row owned by the bound organization (any supplied organization_id is ignored)."""
        values.pop("organization_id", None)
        record = self.model(organization_id=self.organization_id, **values)
        self.db.add(record)
        await self.db.flush()
        return record

    async def get(self, record_id: UUID) -> Optional[ModelT]:
        """Get by id; rows owned by other organizations are reported as absent."""
        result = await self.db.execute(
            select(self.model).where(
                self.model.id == record_id,
                self._scope(),
            )
        )
        return result.scalar_one_or_none()

    async def list(
        self,
        *criteria,
        order_by=None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[ModelT]:
        query = select(self.model).where(self._scope(), *criteria)
        if order_by is None:
            order_by = self.model.created_at.desc()
        query = query.order_by(order_by).limit(limit).offset(offset)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count(self, *criteria) -> int:
        result = await self.db.execute(
            select(func.count(self.model.id)).where(self._scope(), *criteria)
        )
        return result.scalar_one() or 0

    async def update(self, record_id: UUID, **values: Any) -> Optional[ModelT]:
        record = await self.get(record_id)
        if not record:
            return None
        for field, value in values.items():
            if field in PROTECTED_FIELDS:
                continue
            setattr(record, field, value)
        await self.db.flush()
        return record

    async def delete(self, record_id: UUID) -> bool:
        record = await self.get(record_id)
        if not record:
            return False
        await self.db.delete(record)
        await self.db.flush()
        return True
