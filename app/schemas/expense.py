"""
Expense Pydantic schemas.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from app.models.enums import Currency, ExpenseCategory, PaymentMethod
from app.schemas.base import CamelModel, TenantScopedRead


class ExpenseCreate(CamelModel):
    expense_date: date
    amount: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2)
    category: ExpenseCategory
    vendor: Optional[str] = Field(None, max_length=255)
    description: str = Field(..., min_length=1)
    payment_method: Optional[PaymentMethod] = None
    currency: Optional[Currency] = None


class ExpenseRead(TenantScopedRead):
    expense_date: date
    amount: Decimal
    category: ExpenseCategory
    vendor: Optional[str] = None
    description: str
    payment_method: Optional[PaymentMethod] = None
    currency: Currency
    recorded_by_id: UUID


class CategoryTotal(CamelModel):
    category: ExpenseCategory
    total: Decimal
    count: int


class ExpenseSummary(CamelModel):
    total: Decimal
    count: int
    categories: List[CategoryTotal]
