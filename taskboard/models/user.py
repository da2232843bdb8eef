"""User model (credential store)."""

from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, UUIDMixin


class User(UUIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "users"

    # Stored exactly as registered; lookups are case-sensitive.
    email: str = Field(nullable=False, unique=True, index=True, max_length=320)
    password_hash: str = Field(nullable=False)
