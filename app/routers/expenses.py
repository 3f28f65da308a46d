"""
Expense router - API endpoints for expenses.
"""

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import OrganizationContext, get_db, require_roles
from app.models.enums import ExpenseCategory, MembershipRole
from app.schemas.expense import ExpenseCreate, ExpenseRead, ExpenseSummary
from app.services.expense_service import ExpenseService

router = APIRouter(prefix="/expenses", tags=["expenses"])

member_access = require_roles(MembershipRole.OWNER, MembershipRole.MEMBER)


@router.get("", response_model=List[ExpenseRead])
async def list_expenses(
    context: OrganizationContext = Depends(member_access),
    db: AsyncSession = Depends(get_db),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    category: Optional[ExpenseCategory] = None,
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
):
    """List expenses of the active organization, newest first."""
    service = ExpenseService(db, context.organization_id)
    return await service.list_expenses(
        limit=limit,
        offset=offset,
        category=category,
        date_from=date_from,
        date_to=date_to,
    )


@router.get("/summary", response_model=ExpenseSummary)
async def expense_summary(
    context: OrganizationContext = Depends(member_access),
    db: AsyncSession = Depends(get_db),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
):
    """Totals per category for the active organization."""
    service = ExpenseService(db, context.organization_id)
    return await service.summarize(date_from=date_from, date_to=date_to)


@router.get("/{expense_id}", response_model=ExpenseRead)
async def get_expense(
    expense_id: UUID,
    context: OrganizationContext = Depends(member_access),
    db: AsyncSession = Depends(get_db),
):
    """Get an expense by ID."""
    service = ExpenseService(db, context.organization_id)
    return await service.get_expense(expense_id)


@router.post("", response_model=ExpenseRead, status_code=status.HTTP_201_CREATED)
async def record_expense(
    data: ExpenseCreate,
    context: OrganizationContext = Depends(member_access),
    db: AsyncSession = Depends(get_db),
):
    """Record an expense; currency defaults to the organization's."""
    service = ExpenseService(db, context.organization_id)
    expense = await service.record_expense(context.principal_id, data, context.organization.currency)
    await db.commit()
    return expense
