"""Expense model - a tenant-scoped ledger entry."""

import uuid
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, Enum, ForeignKey, Index, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base_model import TenantScopedModel
from app.models.enums import Currency, ExpenseCategory, PaymentMethod, enum_values


class Expense(TenantScopedModel):
    __tablename__ = "expense"

    expense_date: Mapped[date] = mapped_column(Date, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)

    category: Mapped[ExpenseCategory] = mapped_column(
        Enum(ExpenseCategory, native_enum=False, length=50, values_callable=enum_values),
        nullable=False,
    )

    vendor: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    payment_method: Mapped[Optional[PaymentMethod]] = mapped_column(
        Enum(PaymentMethod, native_enum=False, length=30, values_callable=enum_values),
        nullable=True,
    )

    currency: Mapped[Currency] = mapped_column(
        Enum(Currency, native_enum=False, length=3, values_callable=enum_values),
        nullable=False,
        default=Currency.INR,
    )

    recorded_by_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("principal.id"),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_expense_organization_date", "organization_id", "expense_date"),
        Index("ix_expense_organization_category", "organization_id", "category"),
    )

    def __repr__(self):
        return f"<Expense(id={self.id}, amount={self.amount}, category={self.category})>"
