"""
Task Pydantic schemas.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from app.models.enums import TaskPriority, TaskStatus
from app.schemas.base import CamelModel, TenantScopedRead


class TaskCreate(CamelModel):
    """Schema for creating a new task."""

    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    assigned_to_id: Optional[UUID] = None
    due_date: Optional[datetime] = None


class TaskUpdate(CamelModel):
    """Schema for updating a task."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assigned_to_id: Optional[UUID] = None
    due_date: Optional[datetime] = None


class TaskRead(TenantScopedRead):
    """Schema for reading task data (API response)."""

    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    assigned_to_id: Optional[UUID] = None
    created_by_id: UUID
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
