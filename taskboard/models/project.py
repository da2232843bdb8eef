"""Project model."""

import uuid

from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, UUIDMixin


class Project(UUIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "projects"

    name: str = Field(nullable=False, max_length=200)
    # Fixed at creation, never transferred.
    owner_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)
