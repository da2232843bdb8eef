"""
Project export: a one-shot snapshot of a project with its tasks and members.
"""

from __future__ import annotations

import re
import uuid
from datetime import datetime, timezone

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.services import memberships, projects, tasks
from taskboard_shared.schemas.common import UserRef
from taskboard_shared.schemas.projects import ExportMembership, ProjectExport

log = structlog.get_logger()


async def export_project(
    session: AsyncSession, project_id: uuid.UUID, *, now: datetime | None = None
) -> ProjectExport:
    """Materialize the project graph. Raises NotFound if the project is gone."""
    project = await projects.get_project(session, project_id)
    task_reads = await tasks.list_tasks(session, project_id)
    member_rows = await memberships.list_memberships(session, project_id)

    snapshot = ProjectExport(
        id=project.id,
        name=project.name,
        owner_id=project.owner_id,
        created_at=project.created_at,
        tasks=task_reads,
        memberships=[
            ExportMembership(
                id=m.id,
                user_id=m.user_id,
                project_id=m.project_id,
                created_at=m.created_at,
                user=UserRef(id=u.id, email=u.email),
            )
            for m, u in member_rows
        ],
        exported_at=now or datetime.now(timezone.utc),
    )
    log.info(
        "project.exported",
        project_id=str(project_id),
        tasks=len(snapshot.tasks),
        memberships=len(snapshot.memberships),
    )
    return snapshot


def export_filename(project_name: str, exported_at: datetime) -> str:
    """``project_<name>_<timestamp>.json`` with whitespace runs turned into ``_``."""
    safe_name = re.sub(r"\s+", "_", project_name)
    safe_name = safe_name.replace('"', "").replace("\\", "")
    return f"project_{safe_name}_{exported_at.isoformat()}.json"
