"""Access logging middleware.

One structured event per request. Requests the gate turns away are
logged as ``access_denied`` with the error code the handler attached,
so authorization failures can be followed per user and per route.
"""

import time
from collections.abc import Iterable
from typing import Any

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp


logger = structlog.get_logger()

QUIET_PATHS = ("/health/", "/docs", "/redoc", "/openapi.json")

DENIED_STATUS_CODES = frozenset({401, 403})


def get_client_ip(request: Request) -> str | None:
    """Client address, preferring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip() or None
    return request.client.host if request.client else None


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request once it has been answered.

    The request ID comes from RequestIdMiddleware through the structlog
    context; the caller's ID and the error code are read from
    ``request.state`` where the gate and the error handlers leave them.
    """

    def __init__(self, app: ASGIApp, quiet_paths: Iterable[str] = QUIET_PATHS) -> None:
        super().__init__(app)
        self.quiet_paths = tuple(quiet_paths)

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.url.path.startswith(self.quiet_paths):
            return await call_next(request)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request_failed",
                method=request.method,
                path=request.url.path,
                duration_ms=self._elapsed_ms(started),
            )
            raise

        event: dict[str, Any] = {
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": self._elapsed_ms(started),
            "client_ip": get_client_ip(request),
        }
        user_id = getattr(request.state, "user_id", None)
        if user_id is not None:
            event["user_id"] = str(user_id)
        error_code = getattr(request.state, "error_code", None)
        if error_code is not None:
            event["error_code"] = error_code

        if response.status_code in DENIED_STATUS_CODES:
            logger.warning("access_denied", **event)
        elif response.status_code >= 500:
            logger.error("request_completed", **event)
        else:
            logger.info("request_completed", **event)

        return response

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return round((time.perf_counter() - started) * 1000, 2)
