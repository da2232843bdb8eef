"""Project membership (join table between users and projects)."""

import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, UUIDMixin


class Membership(UUIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "memberships"
    __table_args__ = (
        sa.UniqueConstraint("user_id", "project_id", name="uq_memberships_user_project"),
    )

    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)
    project_id: uuid.UUID = Field(
        foreign_key="projects.id", ondelete="CASCADE", nullable=False, index=True
    )
