"""
Task router - API endpoints for tasks.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import OrganizationContext, get_db, require_roles
from app.models.enums import MembershipRole, TaskStatus
from app.schemas.task import TaskCreate, TaskRead, TaskUpdate
from app.services.task_service import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])

member_access = require_roles(MembershipRole.OWNER, MembershipRole.MEMBER)


@router.get("", response_model=List[TaskRead])
async def list_tasks(
    context: OrganizationContext = Depends(member_access),
    db: AsyncSession = Depends(get_db),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    status: Optional[TaskStatus] = None,
    assigned_to_id: Optional[UUID] = Query(None, alias="assignedToId"),
    due_date_from: Optional[datetime] = Query(None, alias="dueDateFrom"),
    due_date_to: Optional[datetime] = Query(None, alias="dueDateTo"),
):
    """
    List tasks of the active organization with pagination and filters.

    Filters: status, assignedToId, dueDateFrom, dueDateTo.
    """
    service = TaskService(db, context.organization_id)
    return await service.list_tasks(
        limit=limit,
        offset=offset,
        status=status,
        assigned_to_id=assigned_to_id,
        due_date_from=due_date_from,
        due_date_to=due_date_to,
    )


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(
    task_id: UUID,
    context: OrganizationContext = Depends(member_access),
    db: AsyncSession = Depends(get_db),
):
    """Get a task by ID."""
    service = TaskService(db, context.organization_id)
    return await service.get_task(task_id)


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(
    data: TaskCreate,
    context: OrganizationContext = Depends(member_access),
    db: AsyncSession = Depends(get_db),
):
    """Create a new task."""
    service = TaskService(db, context.organization_id)
    task = await service.create_task(context.principal_id, data)
    await db.commit()
    return task


@router.put("/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: UUID,
    data: TaskUpdate,
    context: OrganizationContext = Depends(member_access),
    db: AsyncSession = Depends(get_db),
):
    """Update a task."""
    service = TaskService(db, context.organization_id)
    task = await service.update_task(task_id, data)
    await db.commit()
    return task


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: UUID,
    context: OrganizationContext = Depends(member_access),
    db: AsyncSession = Depends(get_db),
):
    """Delete a task."""
    service = TaskService(db, context.organization_id)
    await service.delete_task(task_id)
    await db.commit()
