"""
Models package - exports all database models.

Import all models here so Alembic can detect them.
"""

from app.db.base import Base
from app.models.base_model import TenantScopedModel
from app.models.enums import (
    Currency,
    ExpenseCategory,
    MembershipRole,
    MembershipStatus,
    PaymentMethod,
    TaskPriority,
    TaskStatus,
)
from app.models.principal import Principal
from app.models.organization import Organization
from app.models.membership import Membership
from app.models.task import Task
from app.models.expense import Expense

__all__ = [
    "Base",
    "TenantScopedModel",
    "Currency",
    "ExpenseCategory",
    "MembershipRole",
    "MembershipStatus",
    "PaymentMethod",
    "TaskPriority",
    "TaskStatus",
    "Principal",
    "Organization",
    "Membership",
    "Task",
    "Expense",
]
