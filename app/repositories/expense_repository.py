"""
Expense repository - database operations for Expense.
"""

from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import func, select

from app.models.enums import ExpenseCategory
from app.models.expense import Expense
from app.repositories.tenant_scoped_repository import TenantScopedRepository


class ExpenseRepository(TenantScopedRepository[Expense]):
    """Repository for Expense database operations."""

    model = Expense

    async def list_filtered(
        self,
        limit: int = 50,
        offset: int = 0,
        category: Optional[ExpenseCategory] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[Expense]:
        criteria = []
        if category is not None:
            criteria.append(Expense.category == category)
        if date_from is not None:
            criteria.append(Expense.expense_date >= date_from)
        if date_to is not None:
            criteria.append(Expense.expense_date <= date_to)
        return await self.list(*criteria, order_by=Expense.expense_date.desc(), limit=limit, offset=offset)

    async def totals_by_category(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[Tuple[ExpenseCategory, object, int]]:
        """(category, total amount, count) rows for the bound organization."""
        statement = self.scoped(
            select(
                Expense.category,
                func.sum(Expense.amount),
                func.count(Expense.id),
            )
        )
        if date_from is not None:
            statement = statement.where(Expense.expense_date >= date_from)
        if date_to is not None:
            statement = statement.where(Expense.expense_date <= date_to)
        statement = statement.group_by(Expense.category).order_by(func.sum(Expense.amount).desc())
        result = await self.db.execute(statement)
        return [(category, total, count) for category, total, count in result.all()]
