"""
Expense business logic service.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFoundError
from app.models.enums import ExpenseCategory
from app.models.expense import Expense
from app.repositories.expense_repository import ExpenseRepository
from app.schemas.expense import ExpenseCreate


class ExpenseService:
    """Service for expense business logic, bound to one organization."""

    def __init__(self, db: AsyncSession, organization_id: UUID):
        self.repository = ExpenseRepository(db, organization_id)

    async def list_expenses(
        self,
        limit: int = 50,
        offset: int = 0,
        category: Optional[ExpenseCategory] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[Expense]:
        return await self.repository.list_filtered(
            limit=limit,
            offset=offset,
            category=category,
            date_from=date_from,
            date_to=date_to,
        )

    async def get_expense(self, expense_id: UUID) -> Expense:
        expense = await self.repository.get(expense_id)
        if expense is None:
            raise NotFoundError("Expense not found.")
        return expense

    async def record_expense(self, recorder_id: UUID, data: ExpenseCreate, default_currency) -> Expense:
        values = data.model_dump()
        if values.get("currency") is None:
            values["currency"] = default_currency
        return await self.repository.create(recorded_by_id=recorder_id, **values)

    async def summarize(self, date_from: Optional[date] = None, date_to: Optional[date] = None) -> dict:
        """Totals per category plus the overall total."""
        rows = await self.repository.totals_by_category(date_from=date_from, date_to=date_to)
        categories = [
            {
                "category": ExpenseCategory(category),
                "total": Decimal(total or 0),
                "count": count,
            }
            for category, total, count in rows
        ]
        return {
            "total": sum((row["total"] for row in categories), Decimal("0")),
            "count": sum(row["count"] for row in categories),
            "categories": categories,
        }
