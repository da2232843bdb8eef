"""
Membership registry: who may access which project.

Uniqueness of (user_id, project_id) is enforced by the database constraint
``uq_memberships_user_project``; an insert that violates it surfaces as a
Conflict, so concurrent invites of the same user leave exactly one row.
"""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from taskboard.core.errors import Conflict, NotFound
from taskboard.models.membership import Membership
from taskboard.models.project import Project
from taskboard.models.user import User

log = structlog.get_logger()


async def is_member(session: AsyncSession, user_id: uuid.UUID, project_id: uuid.UUID) -> bool:
    result = await session.execute(
        select(Membership.id).where(
            Membership.user_id == user_id,
            Membership.project_id == project_id,
        )
    )
    return result.first() is not None


async def add_member(session: AsyncSession, project_id: uuid.UUID, email: str) -> Membership:
    """Invite the user registered under ``email`` into the project."""
    project = await session.get(Project, project_id)
    if not project:
        raise NotFound("Project not found")

    result = await session.execute(select(User).where(User.email == email))
    invitee = result.scalar_one_or_none()
    if not invitee:
        raise NotFound(f"User with email {email} not found")

    invitee_id = invitee.id
    membership = Membership(user_id=invitee_id, project_id=project.id)
    session.add(membership)
    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        log.info("membership.conflict", project_id=str(project_id), user_id=str(invitee_id))
        raise Conflict("User is already a member of this project")

    log.info("membership.added", project_id=str(project_id), user_id=str(invitee_id))
    return membership


async def list_members(session: AsyncSession, project_id: uuid.UUID) -> list[User]:
    """Members of a project in the order they joined."""
    result = await session.execute(
        select(User)
        .join(Membership, Membership.user_id == User.id)
        .where(Membership.project_id == project_id)
        .order_by(Membership.created_at)
    )
    return list(result.scalars().all())


async def list_memberships(
    session: AsyncSession, project_id: uuid.UUID
) -> list[tuple[Membership, User]]:
    result = await session.execute(
        select(Membership, User)
        .join(User, User.id == Membership.user_id)
        .where(Membership.project_id == project_id)
        .order_by(Membership.created_at)
    )
    return [(m, u) for m, u in result.all()]
