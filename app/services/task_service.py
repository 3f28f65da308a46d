"""
Task business logic service.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFoundError, ValidationError
from app.models.enums import TaskStatus
from app.models.task import Task
from app.repositories.membership_repository import MembershipRepository
from app.repositories.task_repository import TaskRepository
from app.schemas.task import TaskCreate, TaskUpdate
from app.utils.time import utc_now


class TaskService:
    """Service for task business logic, bound to one organization."""

    def __init__(self, db: AsyncSession, organization_id: UUID):
        self.organization_id = organization_id
        self.repository = TaskRepository(db, organization_id)
        self.memberships = MembershipRepository(db)

    async def _check_assignee(self, assigned_to_id: Optional[UUID]) -> None:
        """The assignee must be an active member of the same organization."""
        if assigned_to_id is None:
            return
        membership = await self.memberships.get_active(assigned_to_id, self.organization_id)
        if membership is None:
            raise ValidationError(
                "Assignee must be an active member of this organization.",
                details={"field": "assignedToId"},
            )

    async def list_tasks(
        self,
        limit: int = 50,
        offset: int = 0,
        status: Optional[TaskStatus] = None,
        assigned_to_id: Optional[UUID] = None,
        due_date_from: Optional[datetime] = None,
        due_date_to: Optional[datetime] = None,
    ) -> List[Task]:
        """List tasks with filters."""
        return await self.repository.list_filtered(
            limit=limit,
            offset=offset,
            status=status,
            assigned_to_id=assigned_to_id,
            due_date_from=due_date_from,
            due_date_to=due_date_to,
        )

    async def get_task(self, task_id: UUID) -> Task:
        task = await self.repository.get(task_id)
        if task is None:
            raise NotFoundError("Task not found.")
        return task

    async def create_task(self, creator_id: UUID, data: TaskCreate) -> Task:
        await self._check_assignee(data.assigned_to_id)
        values = data.model_dump()
        if values.get("status") == TaskStatus.COMPLETED:
            values["completed_at"] = utc_now()
        return await self.repository.create(created_by_id=creator_id, **values)

    async def update_task(self, task_id: UUID, data: TaskUpdate) -> Task:
        update_data = data.model_dump(exclude_unset=True)
        # Required columns can't be cleared
        for field in ("title", "status", "priority"):
            if field in update_data and update_data[field] is None:
                update_data.pop(field)
        if "assigned_to_id" in update_data:
            await self._check_assignee(update_data["assigned_to_id"])

        task = await self.get_task(task_id)
        new_status = update_data.get("status")
        if new_status is not None and new_status != task.status:
            update_data["completed_at"] = utc_now() if new_status == TaskStatus.COMPLETED else None

        return await self.repository.update(task.id, **update_data)

    async def delete_task(self, task_id: UUID) -> None:
        if not await self.repository.delete(task_id):
            raise NotFoundError("Task not found.")
