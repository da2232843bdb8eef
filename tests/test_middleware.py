"""
Tests for the HTTP middleware stack and global error handling.
"""

from __future__ import annotations

import uuid

import pytest

from taskboard.core.middleware import SECURITY_HEADERS
from taskboard.services import export as export_service


class TestSecurityHeaders:
    async def test_headers_on_public_route(self, make_client):
        resp = await make_client().get("/health")
        for header, value in SECURITY_HEADERS.items():
            assert resp.headers[header] == value

    async def test_headers_on_gatekeeper_rejection(self, make_client):
        resp = await make_client().get("/api/projects")
        assert resp.status_code == 401
        assert resp.headers["X-Content-Type-Options"] == "nosniff"


class TestProjectGatekeeper:
    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/projects"),
            ("POST", "/api/projects"),
            ("GET", "/api/projects/{pid}"),
            ("DELETE", "/api/projects/{pid}"),
            ("GET", "/api/projects/{pid}/members"),
            ("GET", "/api/projects/{pid}/tasks"),
            ("GET", "/api/projects/{pid}/export"),
            ("GET", "/api/projects/not-even-a-uuid/whatever"),
        ],
    )
    async def test_rejects_without_token(self, make_client, method, path):
        resp = await make_client().request(method, path.format(pid=uuid.uuid4()))
        assert resp.status_code == 401
        assert resp.json() == {"detail": "Authentication failed: no token provided"}

    async def test_rejects_invalid_token(self, make_client):
        client = make_client()
        client.cookies.set("token", "garbage")
        resp = await client.get("/api/projects")
        assert resp.status_code == 401
        assert resp.json() == {"detail": "Authentication failed: invalid token"}

    async def test_other_prefixes_not_gated(self, make_client):
        """Paths that merely share the prefix text are routed normally."""
        resp = await make_client().get("/api/projectsx")
        assert resp.status_code == 404

    async def test_passes_valid_token(self, signup):
        client, _ = await signup("a@x.io")
        resp = await client.get("/api/projects")
        assert resp.status_code == 200
        assert resp.json() == []


class TestErrorHandling:
    async def test_validation_error_is_400(self, signup):
        client, _ = await signup("a@x.io")
        resp = await client.post("/api/projects", json={})
        assert resp.status_code == 400
        assert resp.json()["detail"].startswith("Invalid input")

    async def test_unhandled_error_is_generic_500(self, signup, new_project, make_client, monkeypatch):
        _, user = await signup("a@x.io")
        owner = make_client(raise_app_exceptions=False)
        await owner.post("/api/auth/login", json={"email": "a@x.io", "password": "pw1"})
        project = await new_project(owner)

        async def explode(*args, **kwargs):
            raise RuntimeError("database exploded: secret internals")

        monkeypatch.setattr(export_service, "export_project", explode)
        resp = await owner.get(f"/api/projects/{project['id']}/export")
        assert resp.status_code == 500
        assert resp.json() == {"detail": "Internal Server Error"}
        assert "secret internals" not in resp.text
