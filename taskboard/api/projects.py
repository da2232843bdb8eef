"""
Project endpoints: CRUD, membership, board summary and export.

- Any authenticated user may create a project and becomes its owner.
- Members may read the project, its members, its summary and its export.
- Only the owner may invite members or delete the project.
- Deleting an absent project succeeds (204).
"""

from __future__ import annotations

import uuid
from typing import List
from urllib.parse import quote

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.auth import (
    AuthenticatedUser,
    get_authenticated_user,
    require_member,
    require_owner,
)
from taskboard.core.database import get_session
from taskboard.services import export as export_service
from taskboard.services import memberships as membership_service
from taskboard.services import projects as project_service
from taskboard_shared.schemas.common import UserRef
from taskboard_shared.schemas.projects import (
    MemberInvite,
    MembershipRead,
    ProjectCreate,
    ProjectRead,
)
from taskboard_shared.schemas.tasks import TaskSummary

router = APIRouter()


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


@router.get("", response_model=List[ProjectRead])
async def list_projects(
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    """Projects the caller belongs to, newest first."""
    return await project_service.list_projects_for_user(session, auth.user_id)


@router.post("", response_model=ProjectRead, status_code=201)
async def create_project(
    project_in: ProjectCreate,
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    """Create a project owned by the caller."""
    project = await project_service.create_project(session, project_in.name, auth.user_id)
    await session.commit()
    await session.refresh(project)
    return project


@router.get("/{project_id}", response_model=ProjectRead)
async def get_project(
    project_id: uuid.UUID,
    auth: AuthenticatedUser = Depends(require_member),
    session: AsyncSession = Depends(get_session),
):
    return await project_service.get_project(session, project_id)


@router.delete("/{project_id}", status_code=204)
async def delete_project(
    project_id: uuid.UUID,
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    """Delete a project with its tasks and memberships. Owner only."""
    await project_service.delete_project(session, project_id, auth.user_id)
    await session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Project Membership
# ---------------------------------------------------------------------------


@router.post("/{project_id}/members", response_model=MembershipRead, status_code=201)
async def invite_member(
    project_id: uuid.UUID,
    body: MemberInvite,
    auth: AuthenticatedUser = Depends(require_owner),
    session: AsyncSession = Depends(get_session),
):
    """Invite a registered user by email (owner only)."""
    membership = await membership_service.add_member(session, project_id, body.email)
    await session.commit()
    return membership


@router.get("/{project_id}/members", response_model=List[UserRef])
async def list_members(
    project_id: uuid.UUID,
    auth: AuthenticatedUser = Depends(require_member),
    session: AsyncSession = Depends(get_session),
):
    return await membership_service.list_members(session, project_id)


# ---------------------------------------------------------------------------
# Board summary & export
# ---------------------------------------------------------------------------


@router.get("/{project_id}/summary", response_model=TaskSummary)
async def project_summary(
    project_id: uuid.UUID,
    auth: AuthenticatedUser = Depends(require_member),
    session: AsyncSession = Depends(get_session),
):
    """Task counts per status column."""
    return await project_service.summarize_tasks(session, project_id)


@router.get("/{project_id}/export")
async def export_project(
    project_id: uuid.UUID,
    auth: AuthenticatedUser = Depends(require_member),
    session: AsyncSession = Depends(get_session),
):
    """Download the project, its tasks and its members as a JSON file."""
    snapshot = await export_service.export_project(session, project_id)
    filename = export_service.export_filename(snapshot.name, snapshot.exported_at)
    ascii_name = filename.encode("ascii", "ignore").decode()
    return Response(
        content=snapshot.model_dump_json(indent=2),
        media_type="application/json",
        headers={
            "Content-Disposition": (
                f'attachment; filename="{ascii_name}"; '
                f"filename*=UTF-8''{quote(filename)}"
            )
        },
    )
