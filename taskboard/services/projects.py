"""
Project registry: creation with owner membership, lookup, listing, deletion.
"""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from taskboard.core.errors import Forbidden, InvalidInput, NotFound
from taskboard.models.membership import Membership
from taskboard.models.project import Project
from taskboard.models.task import Task
from taskboard_shared.schemas.common import TASK_STATUS_ORDER
from taskboard_shared.schemas.tasks import TaskSummary

log = structlog.get_logger()


async def create_project(session: AsyncSession, name: str, owner_id: uuid.UUID) -> Project:
    """Create a project and its owner's membership in the same transaction."""
    name = (name or "").strip()
    if not name:
        raise InvalidInput("Project name is required")

    project = Project(name=name, owner_id=owner_id)
    session.add(project)
    await session.flush()  # get project.id

    session.add(Membership(user_id=owner_id, project_id=project.id))
    await session.flush()

    log.info("project.created", project_id=str(project.id), owner_id=str(owner_id))
    return project


async def get_project(session: AsyncSession, project_id: uuid.UUID) -> Project:
    project = await session.get(Project, project_id)
    if not project:
        raise NotFound("Project not found")
    return project


async def list_projects_for_user(session: AsyncSession, user_id: uuid.UUID) -> list[Project]:
    """Projects the user is a member of (owned or invited), newest first."""
    result = await session.execute(
        select(Project)
        .join(Membership, Membership.project_id == Project.id)
        .where(Membership.user_id == user_id)
        .order_by(Project.created_at.desc())
    )
    return list(result.scalars().all())


async def delete_project(
    session: AsyncSession, project_id: uuid.UUID, requester_id: uuid.UUID
) -> bool:
    """Delete a project with its tasks and memberships.

    Returns False when the project was already gone (not an error).
    """
    project = await session.get(Project, project_id)
    if not project:
        return False
    if project.owner_id != requester_id:
        raise Forbidden("Forbidden: only the project owner can delete this project")

    await session.execute(delete(Task).where(Task.project_id == project_id))
    await session.execute(delete(Membership).where(Membership.project_id == project_id))
    await session.delete(project)
    await session.flush()

    log.info("project.deleted", project_id=str(project_id), owner_id=str(requester_id))
    return True


async def summarize_tasks(session: AsyncSession, project_id: uuid.UUID) -> TaskSummary:
    """Count the project's tasks per status column."""
    result = await session.execute(
        select(Task.status, func.count().label("cnt"))
        .where(Task.project_id == project_id)
        .group_by(Task.status)
    )
    counts = {status.value: 0 for status in TASK_STATUS_ORDER}
    for row in result:
        counts[row.status] = row.cnt
    return TaskSummary(project_id=project_id, total=sum(counts.values()), counts=counts)
