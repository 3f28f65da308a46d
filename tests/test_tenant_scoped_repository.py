"""Tenant isolation of the scoped repository contract."""

import asyncio
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from app.models.enums import ExpenseCategory, TaskStatus
from app.models.expense import Expense
from app.models.task import Task
from app.repositories.expense_repository import ExpenseRepository
from app.repositories.task_repository import TaskRepository
from app.repositories.tenant_scoped_repository import TenantScopedRepository
from app.services.auth_service import AuthService


async def two_organizations(db):
    auth = AuthService(db)
    a = await auth.register_owner("Owner A", "a@example.com", "owner-pass-1", "Org A")
    b = await auth.register_owner("Owner B", "b@example.com", "owner-pass-1", "Org B")
    return a, b


@pytest.mark.db
def test_create_always_uses_bound_organization(session_factory):
    async def main():
        async with session_factory() as db:
            a, b = await two_organizations(db)
            repo = TaskRepository(db, a.organization.id)

            task = await repo.create(
                title="Sneaky",
                created_by_id=a.principal.id,
                organization_id=b.organization.id,
            )

            assert task.organization_id == a.organization.id

    asyncio.run(main())


@pytest.mark.db
def test_foreign_records_are_invisible(session_factory):
    async def main():
        async with session_factory() as db:
            a, b = await two_organizations(db)
            repo_a = TaskRepository(db, a.organization.id)
            repo_b = TaskRepository(db, b.organization.id)
            task_b = await repo_b.create(title="B only", created_by_id=b.principal.id)
            await repo_a.create(title="A one", created_by_id=a.principal.id)

            assert await repo_a.get(task_b.id) is None
            assert await repo_a.update(task_b.id, title="hijacked") is None
            assert await repo_a.delete(task_b.id) is False
            assert [t.title for t in await repo_a.list()] == ["A one"]
            assert await repo_a.count() == 1
            assert await repo_a.count(Task.status == TaskStatus.TODO) == 1

            untouched = await repo_b.get(task_b.id)
            assert untouched.title == "B only"

    asyncio.run(main())


@pytest.mark.db
def test_update_cannot_move_record_to_another_organization(session_factory):
    async def main():
        async with session_factory() as db:
            a, b = await two_organizations(db)
            repo = TaskRepository(db, a.organization.id)
            task = await repo.create(title="Stay", created_by_id=a.principal.id)

            updated = await repo.update(task.id, title="Still here", organization_id=b.organization.id)

            assert updated.title == "Still here"
            assert updated.organization_id == a.organization.id

    asyncio.run(main())


@pytest.mark.db
def test_aggregates_are_scoped_before_grouping(session_factory):
    async def main():
        async with session_factory() as db:
            a, b = await two_organizations(db)
            repo_a = ExpenseRepository(db, a.organization.id)
            repo_b = ExpenseRepository(db, b.organization.id)
            for repo, ctx, amount in ((repo_a, a, "100.00"), (repo_a, a, "50.25"), (repo_b, b, "999.00")):
                await repo.create(
                    expense_date=date(2026, 4, 1),
                    amount=Decimal(amount),
                    category=ExpenseCategory.TECH_INFRASTRUCTURE,
                    description="Servers",
                    recorded_by_id=ctx.principal.id,
                )

            rows = await repo_a.totals_by_category()
            assert len(rows) == 1
            category, total, count = rows[0]
            assert category == ExpenseCategory.TECH_INFRASTRUCTURE
            assert Decimal(total) == Decimal("150.25")
            assert count == 2

            statement = repo_b.scoped(select(func.count(Expense.id)))
            assert (await db.execute(statement)).scalar_one() == 1

    asyncio.run(main())


@pytest.mark.unit
def test_repository_requires_organization():
    with pytest.raises(ValueError):
        TenantScopedRepository(None, None, model=Task)
