"""Fixtures for integration tests: a test router behind each kind of gate."""

from typing import Annotated

import pytest
from fastapi import APIRouter

from realty_access.core.auth.schemas import TokenData
from realty_access.core.permissions.guards import (
    optional_auth,
    require_admin,
    require_all_permissions,
    require_any_permission,
    require_auth,
    require_permission,
)


gated_router = APIRouter(prefix="/gated")


@gated_router.get("/anyone")
async def anyone(identity: Annotated[TokenData | None, optional_auth()]):
    """Endpoint where authentication is optional."""
    return {"anonymous": identity is None}


@gated_router.get("/signed-in")
async def signed_in(identity: Annotated[TokenData, require_auth()]):
    """Endpoint for any authenticated caller."""
    return {"user_id": str(identity.user_id)}


@gated_router.get("/admin")
async def admin_only(identity: Annotated[TokenData, require_admin()]):
    """Endpoint for administrators."""
    return {"user_id": str(identity.user_id)}


@gated_router.get("/delete-post")
async def delete_post(identity: Annotated[TokenData, require_permission("delete_post")]):
    """Endpoint requiring one token."""
    return {"user_id": str(identity.user_id)}


@gated_router.get("/post-editor")
async def post_editor(
    identity: Annotated[
        TokenData, require_all_permissions(["view_posts", "edit_post", "delete_post"])
    ],
):
    """Endpoint requiring every listed token."""
    return {"user_id": str(identity.user_id)}


@gated_router.get("/post-reader")
async def post_reader(
    identity: Annotated[TokenData, require_any_permission(["view_posts", "delete_post"])],
):
    """Endpoint requiring at least one listed token."""
    return {"user_id": str(identity.user_id)}


@pytest.fixture
async def app(app):
    """Application with the gated test routes mounted."""
    app.include_router(gated_router)
    return app
