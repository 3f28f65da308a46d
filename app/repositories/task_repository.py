"""
Task repository - database operations for Task.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from app.models.enums import TaskStatus
from app.models.task import Task
from app.repositories.tenant_scoped_repository import TenantScopedRepository


class TaskRepository(TenantScopedRepository[Task]):
    """Repository for Task database operations."""

    model = Task

    async def list_filtered(
        self,
        limit: int = 50,
        offset: int = 0,
        status: Optional[TaskStatus] = None,
        assigned_to_id: Optional[UUID] = None,
        due_date_from: Optional[datetime] = None,
        due_date_to: Optional[datetime] = None,
    ) -> List[Task]:
        """List tasks with filters."""
        criteria = []
        if status is not None:
            criteria.append(Task.status == status)
        if assigned_to_id is not None:
            criteria.append(Task.assigned_to_id == assigned_to_id)
        if due_date_from is not None:
            criteria.append(Task.due_date >= due_date_from)
        if due_date_to is not None:
            criteria.append(Task.due_date <= due_date_to)
        return await self.list(*criteria, limit=limit, offset=offset)
