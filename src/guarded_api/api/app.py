"""
guarded_api.api.app

FastAPI app factory for the guarded task service.

Responsibilities:
- Build the FastAPI application and register routers, middleware and error handlers.
- Initialize and dispose shared infrastructure (DB engine/session factory).
- Keep settings on `app.state` so dependencies read the same instance the app was built with.
"""

from __future__ import annotations

from fastapi import FastAPI

from guarded_api.api.errors import register_error_handlers
from guarded_api.api.routers.audit import router as audit_router
from guarded_api.api.routers.boards import router as boards_router
from guarded_api.api.routers.dev_auth import router as dev_auth_router
from guarded_api.api.routers.health import router as health_router
from guarded_api.api.routers.members import router as members_router
from guarded_api.api.routers.notifications import router as notifications_router
from guarded_api.api.routers.tasks import router as tasks_router
from guarded_api.db.init_db import bootstrap_admin, init_db
from guarded_api.db.session import create_engine, create_sessionmaker
from guarded_api.observability.logging import configure_logging, get_logger
from guarded_api.observability.middleware import RequestContextMiddleware
from guarded_api.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    app = FastAPI(
        title="Guarded Task API",
        version="0.1.0",
        docs_url="/docs",
        openapi_url="/openapi.json",
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    register_error_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(dev_auth_router)
    app.include_router(tasks_router)
    app.include_router(boards_router)
    app.include_router(notifications_router)
    app.include_router(members_router)
    app.include_router(audit_router)

    @app.on_event("startup")
    async def _startup() -> None:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Prod schemas come from Alembic migrations.
            await init_db(engine)
            if settings.bootstrap_admin_email:
                await bootstrap_admin(
                    app.state.sessionmaker,
                    email=settings.bootstrap_admin_email,
                    name=settings.bootstrap_admin_name,
                )

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        engine = getattr(app.state, "engine", None)
        if engine is not None:
            await engine.dispose()
        log.info("shutdown")

    return app
