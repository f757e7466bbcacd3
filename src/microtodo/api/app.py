"""
microtodo.api.app

FastAPI app factories for the identity and task services.

Responsibilities:
- Build each service's FastAPI application and register routers/middleware.
- Build the token validator and ownership enforcer from settings, once per app.
- Initialize and dispose shared infrastructure (DB engine/session factory).
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI
from sqlalchemy import Table

from microtodo import __version__
from microtodo.api.errors import register_error_handlers
from microtodo.api.routers.auth import router as auth_router
from microtodo.api.routers.health import router as health_router
from microtodo.api.routers.tasks import router as tasks_router
from microtodo.api.routers.users import router as users_router
from microtodo.auth.deps import jwt_config
from microtodo.auth.jwt import TokenValidator
from microtodo.auth.ownership import OwnershipEnforcer
from microtodo.db.init_db import init_db
from microtodo.db.models import IDENTITY_TABLES, TASK_TABLES
from microtodo.db.session import create_engine, create_sessionmaker
from microtodo.observability.logging import configure_logging, get_logger
from microtodo.observability.middleware import RequestContextMiddleware
from microtodo.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    if settings.service == "tasks":
        return create_task_app(settings=settings)
    return create_identity_app(settings=settings)


def create_identity_app(*, settings: Settings) -> FastAPI:
    return _build_app(
        settings=settings,
        title="MicroTodo Identity Service",
        tables=IDENTITY_TABLES,
        routers=(auth_router, users_router),
    )


def create_task_app(*, settings: Settings) -> FastAPI:
    return _build_app(
        settings=settings,
        title="MicroTodo Task Service",
        tables=TASK_TABLES,
        routers=(tasks_router,),
    )


def _build_app(
    *,
    settings: Settings,
    title: str,
    tables: Sequence[Table],
    routers: Sequence[APIRouter],
) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, service=title)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        # Each service owns its tables; create_all skips ones that already exist.
        await init_db(engine, tables)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title=title,
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Same construction in every service: one validator implementation, one key.
    cfg = jwt_config(settings)
    app.state.settings = settings
    app.state.jwt_config = cfg
    app.state.validator = TokenValidator(cfg)
    app.state.enforcer = OwnershipEnforcer(settings.cross_owner_policy)

    app.add_middleware(RequestContextMiddleware)
    register_error_handlers(app)
    app.include_router(health_router, tags=["health"])
    for router in routers:
        app.include_router(router)

    return app


# --- Module Notes -----------------------------------------------------------
# The task service shares only key material with the identity service; it never
# calls the identity service at runtime.
