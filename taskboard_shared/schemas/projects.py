from datetime import datetime
from typing import List
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from .common import UserRef
from .tasks import TaskRead


class ProjectCreate(BaseModel):
    name: str = Field(max_length=200)


class ProjectRead(BaseModel):
    id: UUID
    name: str
    owner_id: UUID
    created_at: datetime

    model_config = {"from_attributes": True}


class MemberInvite(BaseModel):
    email: EmailStr


class MembershipRead(BaseModel):
    id: UUID
    user_id: UUID
    project_id: UUID
    created_at: datetime

    model_config = {"from_attributes": True}


class ExportMembership(MembershipRead):
    user: UserRef


class ProjectExport(ProjectRead):
    """Deep snapshot of a project: the project, its tasks and its members."""
    tasks: List[TaskRead] = Field(default_factory=list)
    memberships: List[ExportMembership] = Field(default_factory=list)
    exported_at: datetime
