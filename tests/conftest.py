"""
Shared fixtures: a fresh SQLite database per test and cookie-carrying
HTTP clients talking to the ASGI app in-process.
"""

from __future__ import annotations

import os

# Must be set before anything under ``taskboard`` is imported: settings are
# read once and cached.
os.environ.setdefault("TB_ENVIRONMENT", "development")
os.environ.setdefault("TB_SECRET_KEY", "test-secret-key-for-unit-tests-only")
os.environ.setdefault("TB_BCRYPT_ROUNDS", "4")
os.environ.setdefault("TB_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("TB_LOG_FORMAT", "console")

import pytest
from httpx import ASGITransport, AsyncClient

from taskboard.core.database import build_engine, build_session_factory, get_session, init_db
from taskboard.main import create_app


@pytest.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'taskboard.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def app(session_factory):
    application = create_app()

    async def override_get_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_session] = override_get_session
    return application


@pytest.fixture
async def make_client(app):
    """Factory for independent clients; each keeps its own cookie jar."""
    clients: list[AsyncClient] = []

    def _make(**transport_kwargs) -> AsyncClient:
        client = AsyncClient(
            transport=ASGITransport(app=app, **transport_kwargs),
            base_url="http://testserver",
        )
        clients.append(client)
        return client

    yield _make
    for client in clients:
        await client.aclose()


@pytest.fixture
def signup(make_client):
    """Register a user on a fresh client; returns (client, user json)."""

    async def _signup(email: str, password: str = "pw1"):
        client = make_client()
        resp = await client.post("/api/auth/register", json={"email": email, "password": password})
        assert resp.status_code == 201, resp.text
        return client, resp.json()

    return _signup


@pytest.fixture
def new_project():
    """Create a project through the API as the given client."""

    async def _new_project(client: AsyncClient, name: str = "Sprint") -> dict:
        resp = await client.post("/api/projects", json={"name": name})
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _new_project
