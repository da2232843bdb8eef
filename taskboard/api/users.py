"""
User lookup endpoints.

GET /api/users/search?email=    find users to invite (max 5, excludes caller)
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.auth import AuthenticatedUser, get_authenticated_user
from taskboard.core.database import get_session
from taskboard.core.errors import InvalidInput
from taskboard.services import users as user_service
from taskboard_shared.schemas.common import UserRef

router = APIRouter()


@router.get("/search", response_model=List[UserRef])
async def search_users(
    email: str | None = Query(None, max_length=320),
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
):
    """Search other users by email substring."""
    if not email:
        raise InvalidInput("Email query parameter is required")
    return await user_service.search_users(session, email, auth.user_id)
