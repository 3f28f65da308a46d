"""Task model - a tenant-scoped work item."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base_model import TenantScopedModel
from app.models.enums import TaskPriority, TaskStatus, enum_values


class Task(TenantScopedModel):
    __tablename__ = "task"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[TaskStatus] = mapped_column(
        Enum(TaskStatus, native_enum=False, length=20, values_callable=enum_values),
        nullable=False,
        default=TaskStatus.TODO,
    )

    priority: Mapped[TaskPriority] = mapped_column(
        Enum(TaskPriority, native_enum=False, length=20, values_callable=enum_values),
        nullable=False,
        default=TaskPriority.MEDIUM,
    )

    # Must hold an active membership in the same organization
    assigned_to_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("principal.id"),
        nullable=True,
    )

    created_by_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("principal.id"),
        nullable=False,
    )

    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_task_organization_status", "organization_id", "status"),
        Index("ix_task_organization_assignee", "organization_id", "assigned_to_id"),
    )

    def __repr__(self):
        return f"<Task(id={self.id}, title={self.title}, status={self.status})>"
