"""Account and authentication schemas."""

from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field

from .common import UserRef


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class UserRead(UserRef):
    """Registered user as returned by /auth/register and /auth/me."""


class AuthResponse(BaseModel):
    message: str
    user: UserRead
