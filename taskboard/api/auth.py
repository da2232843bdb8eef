"""
Authentication endpoints.

- Email/Password registration & login
- Session cookie management (logout, current user)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.auth import (
    AuthenticatedUser,
    clear_session_cookie,
    get_authenticated_user,
    set_session_cookie,
)
from taskboard.core.database import get_session
from taskboard.core.tokens import SessionTokens, get_session_tokens
from taskboard.services import users as user_service
from taskboard_shared.schemas.users import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserRead,
)

router = APIRouter()


@router.post("/register", response_model=UserRead, status_code=201)
async def register(
    body: RegisterRequest,
    response: Response,
    session: AsyncSession = Depends(get_session),
    tokens: SessionTokens = Depends(get_session_tokens),
):
    """Register a new user with email/password and start a session."""
    user = await user_service.register_user(session, body.email, body.password)
    await session.commit()

    set_session_cookie(response, tokens.issue(user.id))
    return UserRead(id=user.id, email=user.email)


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    response: Response,
    session: AsyncSession = Depends(get_session),
    tokens: SessionTokens = Depends(get_session_tokens),
):
    """Authenticate with email/password and receive a session cookie."""
    user = await user_service.authenticate(session, body.email, body.password)

    set_session_cookie(response, tokens.issue(user.id))
    return AuthResponse(
        message="Login successful",
        user=UserRead(id=user.id, email=user.email),
    )


@router.post("/logout")
async def logout(response: Response):
    """Clear the session cookie. The token itself stays valid until it expires."""
    clear_session_cookie(response)
    return {"message": "Logged out"}


@router.get("/me", response_model=UserRead)
async def me(auth: AuthenticatedUser = Depends(get_authenticated_user)):
    return UserRead(id=auth.user_id, email=auth.email)
