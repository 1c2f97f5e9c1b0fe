"""Root API router: health checks at the top level, features under /api/v1."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from realty_access import __version__
from realty_access.api.dependencies import DBSession
from realty_access.config import settings
from realty_access.core.auth import auth_router
from realty_access.core.permissions.catalogue import CatalogueError, get_catalogue
from realty_access.modules import discover_modules


class LivenessResponse(BaseModel):
    status: str


class ReadinessResponse(BaseModel):
    status: str
    checks: dict[str, str]


class InfoResponse(BaseModel):
    app: str
    version: str
    environment: str
    permission_count: int
    employee_default_count: int


health_router = APIRouter(tags=["health"])


@health_router.get("/health/live", response_model=LivenessResponse, summary="Liveness check")
async def liveness() -> LivenessResponse:
    """The process is up and serving requests."""
    return LivenessResponse(status="alive")


@health_router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    responses={503: {"model": ReadinessResponse}},
)
async def readiness(db: DBSession) -> JSONResponse:
    """The store answers and the configured defaults resolve in the catalogue."""
    checks: dict[str, str] = {}

    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except SQLAlchemyError as e:
        checks["database"] = type(e).__name__

    try:
        get_catalogue()
        checks["permission_catalogue"] = "ok"
    except CatalogueError as e:
        checks["permission_catalogue"] = str(e)

    ready = all(result == "ok" for result in checks.values())
    body = ReadinessResponse(status="ready" if ready else "degraded", checks=checks)
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=body.model_dump(),
    )


@health_router.get("/info", response_model=InfoResponse, summary="Application info")
async def info() -> InfoResponse:
    catalogue = get_catalogue()
    return InfoResponse(
        app=settings.app_name,
        version=__version__,
        environment=settings.environment,
        permission_count=len(catalogue.all_permissions),
        employee_default_count=len(catalogue.employee_defaults),
    )


v1_router = APIRouter(prefix="/api/v1")
v1_router.include_router(auth_router)
for module_router in discover_modules():
    v1_router.include_router(module_router)

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(v1_router)
