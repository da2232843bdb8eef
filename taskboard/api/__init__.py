"""
API Router

Mounted under /api. Everything below /api/projects is project-scoped and
additionally guarded by ProjectGatekeeperMiddleware.
"""

from fastapi import APIRouter

from . import auth, projects, tasks, users

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(projects.router, prefix="/projects", tags=["Projects"])
router.include_router(tasks.router, prefix="/projects/{project_id}/tasks", tags=["Tasks"])
router.include_router(users.router, prefix="/users", tags=["Users"])


@router.get("/", tags=["API"])
async def api_root():
    """API root: returns version and available endpoints."""
    return {
        "api": "taskboard",
        "version": "0.1.0",
        "endpoints": [
            "/auth",
            "/projects",
            "/projects/{project_id}/members",
            "/projects/{project_id}/tasks",
            "/projects/{project_id}/summary",
            "/projects/{project_id}/export",
            "/users/search",
        ],
    }
