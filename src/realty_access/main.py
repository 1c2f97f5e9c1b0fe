"""ASGI application factory.

Run with ``uvicorn realty_access.main:create_app --factory``.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from realty_access import __version__
from realty_access.api.router import api_router
from realty_access.config import settings
from realty_access.core.auth import RequestIdMiddleware
from realty_access.core.database import async_engine
from realty_access.core.errors import register_exception_handlers
from realty_access.core.logging import RequestLoggingMiddleware, configure_logging
from realty_access.core.permissions import get_catalogue


configure_logging(settings.log_level, json_logs=settings.is_production)

logger = structlog.get_logger()

LOCAL_FRONTENDS = ["http://localhost:3000", "http://localhost:5173"]


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    # Raises CatalogueError on an unknown default employee token.
    catalogue = get_catalogue()
    logger.info(
        "application_startup",
        app_name=settings.app_name,
        environment=settings.environment,
        permission_count=len(catalogue.all_permissions),
        employee_defaults=len(catalogue.employee_defaults),
    )
    try:
        yield
    finally:
        await async_engine.dispose()
        logger.info("application_shutdown")


def create_app() -> FastAPI:
    """Build the application with its middleware, handlers and routes."""
    public_docs = not settings.is_production
    app = FastAPI(
        title=settings.app_name,
        description="Role- and capability-based access control for the realty admin API",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if public_docs else None,
        redoc_url="/redoc" if public_docs else None,
        openapi_url="/openapi.json" if public_docs else None,
    )

    origins = settings.cors_origins or (LOCAL_FRONTENDS if settings.is_development else [])

    # Starlette runs the last-added middleware first: request id, then logging, then CORS.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)
    app.include_router(api_router)

    return app
