"""
Task service layer: board tasks scoped to a project.

Handles:
- Task CRUD within a project
- Sparse patches (only fields present in the request are applied)
- Enrichment of task data with the assignee's identity
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from taskboard.core.errors import Forbidden, InvalidInput, NotFound
from taskboard.models.task import Task
from taskboard.models.user import User
from taskboard.services import memberships
from taskboard_shared.schemas.common import UserRef
from taskboard_shared.schemas.tasks import TaskCreate, TaskRead, TaskUpdate

log = structlog.get_logger()

# Columns that may not be cleared with an explicit null
_REQUIRED_FIELDS = ("title", "status")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def get_project_task(
    session: AsyncSession, project_id: uuid.UUID, task_id: uuid.UUID, user_id: uuid.UUID
) -> Optional[Task]:
    """Return the task if it exists *in this project*, else None.

    A task filed under another project is checked against the caller's
    membership there first: non-members of the task's own project get
    Forbidden rather than a not-found answer.
    """
    task = await session.get(Task, task_id)
    if not task:
        return None
    if task.project_id != project_id:
        if not await memberships.is_member(session, user_id, task.project_id):
            log.info(
                "auth.forbidden",
                user_id=str(user_id),
                project_id=str(task.project_id),
                reason="not_member_of_task_project",
            )
            raise Forbidden("Forbidden: you are not a member of this project")
        return None
    return task


async def get_project_task_or_404(
    session: AsyncSession, project_id: uuid.UUID, task_id: uuid.UUID, user_id: uuid.UUID
) -> Task:
    task = await get_project_task(session, project_id, task_id, user_id)
    if not task:
        raise NotFound("Task not found")
    return task


async def _ensure_assignee_exists(session: AsyncSession, assignee_id: Optional[uuid.UUID]) -> None:
    if assignee_id is None:
        return
    if not await session.get(User, assignee_id):
        raise InvalidInput("Assignee not found")


def _to_read(task: Task, assignee: Optional[User]) -> TaskRead:
    return TaskRead(
        id=task.id,
        project_id=task.project_id,
        title=task.title,
        description=task.description,
        status=task.status,
        assignee_id=task.assignee_id,
        assignee=UserRef(id=assignee.id, email=assignee.email) if assignee else None,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


async def enrich_task(session: AsyncSession, task: Task) -> TaskRead:
    """Convert a Task ORM object to a TaskRead with the assignee resolved."""
    assignee = await session.get(User, task.assignee_id) if task.assignee_id else None
    return _to_read(task, assignee)


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


async def create_task(
    session: AsyncSession, project_id: uuid.UUID, task_in: TaskCreate
) -> Task:
    if not task_in.title.strip():
        raise InvalidInput("Title and status are required")
    await _ensure_assignee_exists(session, task_in.assignee_id)

    task = Task(
        project_id=project_id,
        title=task_in.title,
        description=task_in.description,
        status=task_in.status.value,
        assignee_id=task_in.assignee_id,
    )
    session.add(task)
    await session.flush()

    log.info("task.created", task_id=str(task.id), project_id=str(project_id))
    return task


async def list_tasks(session: AsyncSession, project_id: uuid.UUID) -> list[TaskRead]:
    """All tasks of a project, oldest first, each with its assignee."""
    result = await session.execute(
        select(Task, User)
        .outerjoin(User, User.id == Task.assignee_id)
        .where(Task.project_id == project_id)
        .order_by(Task.created_at)
    )
    return [_to_read(task, assignee) for task, assignee in result.all()]


async def update_task(session: AsyncSession, task: Task, patch: TaskUpdate) -> Task:
    """Apply only the fields present in ``patch``."""
    update_data = patch.model_dump(exclude_unset=True)

    for field in _REQUIRED_FIELDS:
        if field in update_data and update_data[field] is None:
            raise InvalidInput(f"{field} cannot be null")
    if "title" in update_data and not update_data["title"].strip():
        raise InvalidInput("Title cannot be empty")
    if "assignee_id" in update_data:
        await _ensure_assignee_exists(session, update_data["assignee_id"])
    if "status" in update_data:
        update_data["status"] = update_data["status"].value

    for key, value in update_data.items():
        setattr(task, key, value)
    task.updated_at = datetime.now(timezone.utc)

    session.add(task)
    await session.flush()

    log.info("task.updated", task_id=str(task.id), fields=sorted(update_data))
    return task


async def delete_task(
    session: AsyncSession, project_id: uuid.UUID, task_id: uuid.UUID, user_id: uuid.UUID
) -> bool:
    """Delete a task. Returns False if it was already gone (not an error)."""
    task = await get_project_task(session, project_id, task_id, user_id)
    if not task:
        return False
    await session.delete(task)
    await session.flush()

    log.info("task.deleted", task_id=str(task_id), project_id=str(project_id))
    return True
