"""Task board schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from .common import TaskStatus, UserRef


class TaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    description: Optional[str] = None
    status: TaskStatus
    assignee_id: Optional[UUID] = None


class TaskUpdate(BaseModel):
    """Sparse patch: only fields present in the request body are applied.

    An explicit ``"assignee_id": null`` clears the assignment.
    """
    title: Optional[str] = Field(default=None, min_length=1, max_length=500)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    assignee_id: Optional[UUID] = None


class TaskRead(BaseModel):
    id: UUID
    project_id: UUID
    title: str
    description: Optional[str] = None
    status: str
    assignee_id: Optional[UUID] = None
    assignee: Optional[UserRef] = None
    created_at: datetime
    updated_at: datetime


class TaskSummary(BaseModel):
    """Per-status task counts for a project board."""
    project_id: UUID
    total: int
    counts: dict[str, int] = Field(default_factory=dict)
