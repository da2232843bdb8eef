"""
Security middleware: security headers, project API gatekeeper.
"""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from taskboard.core.auth import read_session_user_id
from taskboard.core.errors import Unauthenticated
from taskboard.core.tokens import get_session_tokens

PROJECT_API_PREFIX = "/api/projects"

# ---------------------------------------------------------------------------
# Security Headers
# ---------------------------------------------------------------------------

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Cache-Control": "no-store",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Attach security headers to every response."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response


# ---------------------------------------------------------------------------
# Project API Gatekeeper
# ---------------------------------------------------------------------------

class ProjectGatekeeperMiddleware(BaseHTTPMiddleware):
    """
    Reject unauthenticated requests under /api/projects before routing.

    Duplicates the per-endpoint check: a handler that forgot its auth
    dependency is still unreachable without a valid session token.
    CORS preflight requests pass through.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path
        if request.method == "OPTIONS" or not (
            path == PROJECT_API_PREFIX or path.startswith(PROJECT_API_PREFIX + "/")
        ):
            return await call_next(request)

        try:
            read_session_user_id(request, get_session_tokens())
        except Unauthenticated as exc:
            return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

        return await call_next(request)
