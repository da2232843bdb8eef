"""
Task endpoints, nested under a project.

Tasks have no ACL of their own: every call requires membership on the
project in the path, and a task that belongs to another project is treated
as absent. Deleting an absent task succeeds (204).
"""

from __future__ import annotations

import uuid
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.auth import AuthenticatedUser, require_member
from taskboard.core.database import get_session
from taskboard.services import tasks as task_service
from taskboard_shared.schemas.tasks import TaskCreate, TaskRead, TaskUpdate

router = APIRouter()


@router.get("", response_model=List[TaskRead])
async def list_tasks_endpoint(
    project_id: uuid.UUID,
    auth: AuthenticatedUser = Depends(require_member),
    session: AsyncSession = Depends(get_session),
):
    """List the project's tasks in creation order, with assignees."""
    return await task_service.list_tasks(session, project_id)


@router.post("", response_model=TaskRead, status_code=201)
async def create_task_endpoint(
    project_id: uuid.UUID,
    task_in: TaskCreate,
    auth: AuthenticatedUser = Depends(require_member),
    session: AsyncSession = Depends(get_session),
):
    task = await task_service.create_task(session, project_id, task_in)
    await session.commit()
    await session.refresh(task)
    return await task_service.enrich_task(session, task)


@router.patch("/{task_id}", response_model=TaskRead)
async def update_task_endpoint(
    project_id: uuid.UUID,
    task_id: uuid.UUID,
    task_in: TaskUpdate,
    auth: AuthenticatedUser = Depends(require_member),
    session: AsyncSession = Depends(get_session),
):
    """Apply a sparse patch. ``assignee_id: null`` unassigns the task."""
    task = await task_service.get_project_task_or_404(session, project_id, task_id, auth.user_id)
    task = await task_service.update_task(session, task, task_in)
    await session.commit()
    await session.refresh(task)
    return await task_service.enrich_task(session, task)


@router.delete("/{task_id}", status_code=204)
async def delete_task_endpoint(
    project_id: uuid.UUID,
    task_id: uuid.UUID,
    auth: AuthenticatedUser = Depends(require_member),
    session: AsyncSession = Depends(get_session),
):
    await task_service.delete_task(session, project_id, task_id, auth.user_id)
    await session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
