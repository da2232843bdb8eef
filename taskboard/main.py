"""
Taskboard API Server

Entry point for the FastAPI application.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from taskboard.api import router as api_router
from taskboard.core.config import get_settings
from taskboard.core.database import init_db
from taskboard.core.logging import configure_logging
from taskboard.core.middleware import ProjectGatekeeperMiddleware, SecurityHeadersMiddleware

settings = get_settings()
log = structlog.get_logger()


def _describe_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "Invalid input: " + "; ".join(parts)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Missing or malformed request fields are client errors (400)."""
    return JSONResponse(status_code=400, content={"detail": _describe_validation_error(exc)})


async def unhandled_exception_handler(request: Request, exc: Exception):
    """Log the full error server-side; the client only gets a generic message."""
    log.error(
        "request.unhandled_error",
        method=request.method,
        path=request.url.path,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title="Taskboard",
        description="Projects, members and task boards with membership-based access control.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # Middleware (last added is outermost)
    app.add_middleware(ProjectGatekeeperMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Content-Type"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(api_router, prefix="/api")

    @app.get("/health", tags=["System"])
    async def health_check():
        """Health check endpoint for liveness probes."""
        return {"status": "ok"}

    @app.get("/ready", tags=["System"])
    async def readiness_check():
        """Readiness check endpoint for startup probes."""
        return {"status": "ready"}

    @app.on_event("startup")
    async def on_startup():
        if settings.auto_create_tables:
            await init_db()
        log.info("Taskboard starting", environment=settings.environment)

    @app.on_event("shutdown")
    async def on_shutdown():
        log.info("Taskboard shutting down")

    return app


app = create_app()


def run() -> None:
    """CLI entry point: serve the app with uvicorn on the configured host/port."""
    import uvicorn

    uvicorn.run(
        "taskboard.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    run()
