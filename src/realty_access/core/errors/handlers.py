"""Exception handlers producing the shared error envelope.

Every failure leaves the API as::

    {"success": false, "message": "...", "code": "TOKEN_EXPIRED", ...}

Exception details are merged in at the top level, so a permission
denial also carries ``required_permissions`` and ``mode``. Store and
unexpected failures are logged in full and answered with a generic
500 body.
"""

from typing import TYPE_CHECKING, Any, cast

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from sqlalchemy.exc import SQLAlchemyError

from realty_access.core.errors.exceptions import AppException


if TYPE_CHECKING:
    from starlette.types import ExceptionHandler


logger = structlog.get_logger()

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


class FieldError(BaseModel):
    """One rejected request field."""

    field: str
    message: str
    type: str | None = None


class ErrorResponse(BaseModel):
    """Error body returned for every failed request."""

    model_config = ConfigDict(extra="allow")

    success: bool = False
    message: str
    code: str
    errors: list[FieldError] | None = None
    trace_id: str | None = None


def _error_response(
    request: Request,
    status_code: int,
    message: str,
    code: str,
    errors: list[FieldError] | None = None,
    extra: dict[str, Any] | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        message=message,
        code=code,
        errors=errors,
        trace_id=getattr(request.state, "trace_id", None),
    ).model_dump(exclude_none=True)
    for key, value in (extra or {}).items():
        body.setdefault(key, value)
    return JSONResponse(status_code=status_code, content=body)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render an application exception with its own status and code."""
    request.state.error_code = exc.error_code
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "app_exception",
        code=exc.error_code,
        status_code=exc.status_code,
        path=request.url.path,
        details=exc.details or None,
    )
    return _error_response(
        request,
        exc.status_code,
        exc.message,
        exc.error_code,
        extra=exc.details,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Reject a malformed request body, path or query as a 400."""
    errors = [
        FieldError(
            field=".".join(str(part) for part in error.get("loc", ()) if part != "body")
            or "body",
            message=error.get("msg", "Invalid value"),
            type=error.get("type"),
        )
        for error in exc.errors()
    ]
    request.state.error_code = "VALIDATION_ERROR"
    logger.info("request_validation_failed", path=request.url.path, fields=len(errors))
    return _error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "Request validation failed",
        "VALIDATION_ERROR",
        errors=errors,
    )


async def database_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """Store failures never leak driver detail to clients."""
    request.state.error_code = "INTERNAL_ERROR"
    logger.error(
        "database_error",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        GENERIC_ERROR_MESSAGE,
        "INTERNAL_ERROR",
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort for anything unhandled; the traceback goes to the log."""
    logger.exception(
        "unhandled_exception",
        path=request.url.path,
        error_type=type(exc).__name__,
    )
    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        GENERIC_ERROR_MESSAGE,
        "INTERNAL_ERROR",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers on an application."""
    handlers: list[tuple[type[Exception], Any]] = [
        (AppException, app_exception_handler),
        (RequestValidationError, validation_exception_handler),
        (SQLAlchemyError, database_exception_handler),
        (Exception, generic_exception_handler),
    ]
    for exc_class, handler in handlers:
        app.add_exception_handler(exc_class, cast("ExceptionHandler", handler))
