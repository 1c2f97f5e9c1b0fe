"""Unit tests for the error envelope."""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from realty_access.core.errors import (
    InvalidPermissionsError,
    NotFoundError,
    PermissionDeniedError,
    register_exception_handlers,
)
from realty_access.core.errors.handlers import (
    GENERIC_ERROR_MESSAGE,
    app_exception_handler,
    generic_exception_handler,
)


pytestmark = pytest.mark.unit


def _request(trace_id: str | None = "trace-1") -> MagicMock:
    request = MagicMock()
    request.state = SimpleNamespace(trace_id=trace_id)
    request.url.path = "/api/v1/permissions/employee/x"
    return request


def _body(response) -> dict:
    return json.loads(response.body)


class TestAppExceptionHandler:
    """Application exceptions keep their status, code and details."""

    async def test_details_are_merged_at_top_level(self):
        request = _request()

        response = await app_exception_handler(
            request, InvalidPermissionsError(["not_a_real_token"])
        )

        assert response.status_code == 400
        assert _body(response) == {
            "success": False,
            "message": "Invalid permissions: not_a_real_token",
            "code": "VALIDATION_ERROR",
            "trace_id": "trace-1",
            "invalid_permissions": ["not_a_real_token"],
        }
        assert request.state.error_code == "VALIDATION_ERROR"

    async def test_permission_denial_carries_requirement(self):
        exc = PermissionDeniedError("denied", required=("view_posts",), mode="all")

        response = await app_exception_handler(_request(trace_id=None), exc)

        body = _body(response)
        assert response.status_code == 403
        assert body["code"] == "PERMISSION_DENIED"
        assert body["required_permissions"] == ["view_posts"]
        assert body["mode"] == "all"
        assert "trace_id" not in body

    async def test_details_do_not_overwrite_envelope_fields(self):
        exc = NotFoundError("User not found", details={"code": "SHADOWED"})

        response = await app_exception_handler(_request(), exc)

        assert _body(response)["code"] == "NOT_FOUND"


class TestServerErrors:
    """Store and unexpected failures are answered generically."""

    async def test_unexpected_exception_is_hidden(self):
        response = await generic_exception_handler(_request(), RuntimeError("secret detail"))

        body = _body(response)
        assert response.status_code == 500
        assert body["code"] == "INTERNAL_ERROR"
        assert body["message"] == GENERIC_ERROR_MESSAGE
        assert "secret" not in json.dumps(body)

    async def test_store_failure_becomes_internal_error(self):
        app = FastAPI()
        register_exception_handlers(app)

        @app.get("/boom")
        async def boom():
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/boom")

        assert response.status_code == 500
        body = response.json()
        assert body == {
            "success": False,
            "message": GENERIC_ERROR_MESSAGE,
            "code": "INTERNAL_ERROR",
        }
