"""
User service: registration, credential checks and member search.
"""

from __future__ import annotations

import secrets
import uuid
from functools import lru_cache

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from taskboard.core.auth import hash_password, verify_password
from taskboard.core.errors import Conflict, InvalidInput, Unauthenticated
from taskboard.models.user import User

log = structlog.get_logger()

# bcrypt only looks at the first 72 bytes of a password.
MAX_PASSWORD_BYTES = 72
SEARCH_LIMIT = 5


@lru_cache
def _dummy_password_hash() -> str:
    return hash_password(secrets.token_urlsafe(16))


def _check_password_length(password: str) -> None:
    if len(password.encode()) > MAX_PASSWORD_BYTES:
        raise InvalidInput(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def register_user(session: AsyncSession, email: str, password: str) -> User:
    """Create a user. Raises Conflict if the email is already registered."""
    _check_password_length(password)
    if await get_user_by_email(session, email):
        raise Conflict("A user with this email already exists")

    user = User(email=email, password_hash=hash_password(password))
    session.add(user)
    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise Conflict("A user with this email already exists")

    log.info("user.registered", user_id=str(user.id), email=email)
    return user


async def authenticate(session: AsyncSession, email: str, password: str) -> User:
    """Check email/password. Raises Unauthenticated on any mismatch."""
    user = await get_user_by_email(session, email)
    if not user:
        # Same bcrypt cost as a real check, so timing does not reveal registered emails.
        verify_password("not-the-password", _dummy_password_hash())
        log.warning("auth.login_failure", email=email, reason="unknown_email")
        raise Unauthenticated("Invalid email or password")

    if len(password.encode()) > MAX_PASSWORD_BYTES or not verify_password(password, user.password_hash):
        log.warning("auth.login_failure", email=email, reason="bad_password")
        raise Unauthenticated("Invalid email or password")

    log.info("auth.login_success", user_id=str(user.id), email=email)
    return user


async def search_users(
    session: AsyncSession, query: str, exclude_user_id: uuid.UUID
) -> list[User]:
    """Users whose email contains ``query``, excluding the caller."""
    result = await session.execute(
        select(User)
        .where(User.email.contains(query, autoescape=True), User.id != exclude_user_id)
        .order_by(User.email)
        .limit(SEARCH_LIMIT)
    )
    return list(result.scalars().all())
