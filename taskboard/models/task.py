"""Task model."""

from typing import Optional
import uuid

from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin


class Task(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "tasks"

    project_id: uuid.UUID = Field(
        foreign_key="projects.id", ondelete="CASCADE", nullable=False, index=True
    )
    title: str = Field(nullable=False, max_length=500)
    description: Optional[str] = None
    status: str = Field(nullable=False, default="todo")  # todo | in-progress | done
    assignee_id: Optional[uuid.UUID] = Field(
        default=None, foreign_key="users.id", ondelete="SET NULL", nullable=True
    )
