"""
Session tokens: signed, time-limited bearer credentials.

Tokens are HS256 JWTs carrying ``sub`` (user id), ``iat``, ``exp`` and
``jti``. Nothing is stored server-side and there is no revocation list, so a
token stays valid until it expires or the signing secret is rotated.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache

import jwt

from taskboard.core.config import get_settings


class InvalidToken(Exception):
    """Token is malformed, tampered with, or expired."""


@dataclass(frozen=True)
class SessionTokens:
    """Issues and verifies session tokens with a fixed secret and lifetime."""

    secret_key: str
    algorithm: str = "HS256"
    ttl_seconds: int = 60 * 60 * 24

    def issue(self, user_id: uuid.UUID, *, now: datetime | None = None) -> str:
        """Create a signed token for ``user_id`` valid for ``ttl_seconds``."""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + timedelta(seconds=self.ttl_seconds),
            "jti": str(uuid.uuid4()),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode(self, token: str, *, now: datetime | None = None) -> dict:
        """Decode and verify a token. Raises jwt.PyJWTError on failure.

        Expiry is checked against the wall clock unless ``now`` is given.
        """
        payload = jwt.decode(
            token,
            self.secret_key,
            algorithms=[self.algorithm],
            options={"require": ["sub", "exp", "iat"], "verify_exp": now is None},
        )
        if now is not None and payload["exp"] <= now.timestamp():
            raise jwt.ExpiredSignatureError("Signature has expired")
        return payload

    def verify(self, token: str, *, now: datetime | None = None) -> uuid.UUID:
        """Return the user id carried by ``token`` or raise InvalidToken."""
        try:
            payload = self.decode(token, now=now)
            return uuid.UUID(payload["sub"])
        except (jwt.PyJWTError, ValueError, TypeError) as exc:
            raise InvalidToken(str(exc)) from exc


@lru_cache
def get_session_tokens() -> SessionTokens:
    settings = get_settings()
    return SessionTokens(
        secret_key=settings.secret_key,
        algorithm=settings.jwt_algorithm,
        ttl_seconds=settings.token_ttl_seconds,
    )
