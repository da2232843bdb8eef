"""
Authentication and Authorization for Taskboard.

- Password hashing (bcrypt)
- Session cookie handling
- Request authentication from the ``token`` cookie
- Project-scoped authorization dependencies (member / owner)

Every project-scoped endpoint authenticates first, then authorizes, and
only then touches domain data. Identity comes from the verified token only.
"""

from __future__ import annotations

import uuid

import bcrypt
import structlog
from fastapi import Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.config import get_settings
from taskboard.core.database import get_session
from taskboard.core.errors import Forbidden, NotFound, Unauthenticated
from taskboard.core.tokens import InvalidToken, SessionTokens, get_session_tokens
from taskboard.models.project import Project
from taskboard.models.user import User
from taskboard.services import memberships

log = structlog.get_logger()
settings = get_settings()

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

def hash_password(password: str) -> str:
    """Hash a password using bcrypt with the configured cost factor."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=settings.bcrypt_rounds)).decode()


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a bcrypt hash."""
    return bcrypt.checkpw(password.encode(), hashed.encode())


# ---------------------------------------------------------------------------
# Session cookie
# ---------------------------------------------------------------------------

def set_session_cookie(response: Response, token: str) -> None:
    """Attach the session token as an HttpOnly, SameSite=Strict cookie."""
    response.set_cookie(
        key=settings.cookie_name,
        value=token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
        path="/",
        max_age=settings.token_ttl_seconds,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        settings.cookie_name,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )


def read_session_user_id(request: Request, tokens: SessionTokens) -> uuid.UUID:
    """Extract and verify the session cookie. Raises Unauthenticated."""
    token = request.cookies.get(settings.cookie_name)
    if not token:
        raise Unauthenticated("Authentication failed: no token provided")
    try:
        return tokens.verify(token)
    except InvalidToken:
        # Expired and malformed tokens are reported the same way.
        raise Unauthenticated("Authentication failed: invalid token")


# ---------------------------------------------------------------------------
# Authentication dependencies
# ---------------------------------------------------------------------------

class AuthenticatedUser:
    """Container for the user behind the current request."""

    def __init__(self, user: User):
        self.user = user
        self.user_id = user.id
        self.email = user.email


async def get_authenticated_user(
    request: Request,
    session: AsyncSession = Depends(get_session),
    tokens: SessionTokens = Depends(get_session_tokens),
) -> AuthenticatedUser:
    """Main authentication dependency: verified cookie -> existing user."""
    user_id = read_session_user_id(request, tokens)
    user = await session.get(User, user_id)
    if not user:
        raise Unauthenticated("Authentication failed: user not found")
    request.state.auth = AuthenticatedUser(user)
    return request.state.auth


# ---------------------------------------------------------------------------
# Authorization dependencies (project scope)
# ---------------------------------------------------------------------------

async def require_member(
    project_id: uuid.UUID,
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
) -> AuthenticatedUser:
    """Caller must hold a membership on the project in the path."""
    if not await memberships.is_member(session, auth.user_id, project_id):
        log.info("auth.forbidden", user_id=str(auth.user_id), project_id=str(project_id), reason="not_member")
        raise Forbidden("Forbidden: you are not a member of this project")
    return auth


async def require_owner(
    project_id: uuid.UUID,
    auth: AuthenticatedUser = Depends(get_authenticated_user),
    session: AsyncSession = Depends(get_session),
) -> AuthenticatedUser:
    """Caller must be the owner of the project in the path."""
    project = await session.get(Project, project_id)
    if not project:
        raise NotFound("Project not found")
    if project.owner_id != auth.user_id:
        log.info("auth.forbidden", user_id=str(auth.user_id), project_id=str(project_id), reason="not_owner")
        raise Forbidden("Forbidden: only the project owner can perform this action")
    return auth
