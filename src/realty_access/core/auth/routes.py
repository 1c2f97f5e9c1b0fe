"""Authentication API routes.

Provides endpoints for:
- Login
- Logout (revokes the presented access credential)
- The current identity and its grants
"""

from fastapi import APIRouter

from realty_access.core.auth.dependencies import Credential, CurrentIdentity
from realty_access.core.auth.schemas import (
    AccessTokenResponse,
    IdentityResponse,
    LoginRequest,
)
from realty_access.core.auth.service import AuthSvc
from realty_access.core.errors import NoTokenError
from realty_access.core.responses import ApiResponse


router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=ApiResponse[AccessTokenResponse],
    summary="Login with email and password",
    description="Authenticate with email and password to receive an access token.",
)
async def login(
    data: LoginRequest,
    service: AuthSvc,
) -> ApiResponse[AccessTokenResponse]:
    """Login with email and password."""
    tokens = await service.login(email=data.email, password=data.password)
    return ApiResponse(message="Login successful", data=tokens)


@router.post(
    "/logout",
    response_model=ApiResponse[None],
    summary="Logout",
    description="Invalidate the presented access token until it expires.",
)
async def logout(
    identity: CurrentIdentity,
    token: Credential,
    service: AuthSvc,
) -> ApiResponse[None]:
    """Revoke the access token used for this request."""
    if token is None:
        raise NoTokenError()
    await service.logout(token, identity)
    return ApiResponse(message="Logout successful")


@router.get(
    "/me",
    response_model=ApiResponse[IdentityResponse],
    summary="Current identity",
    description="Return the authenticated caller and their permission grants.",
)
async def me(
    identity: CurrentIdentity,
    service: AuthSvc,
) -> ApiResponse[IdentityResponse]:
    """Get the current identity."""
    data = await service.describe(identity)
    return ApiResponse(message="Identity retrieved", data=data)
