"""FastAPI dependencies for authentication and authorization.

``make_gate`` builds the request gate for one route: a dependency that
extracts the access credential, rejects revoked or invalid credentials,
re-checks the live account for bans, enforces the admin role and runs
the permission check. Each gate carries its own options; there is no
shared gate state.
"""

from dataclasses import dataclass
from typing import Annotated

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from realty_access.api.dependencies import DBSession
from realty_access.config import settings
from realty_access.core.auth.backend import hash_token, verify_access_token
from realty_access.core.auth.schemas import TokenData
from realty_access.core.errors import (
    AdminRequiredError,
    NoTokenError,
    PermissionDeniedError,
    TokenBlacklistedError,
    UserBannedError,
    UserNotFoundError,
)
from realty_access.core.permissions.checker import MatchMode, PermissionChecker
from realty_access.modules.users.enums import Role
from realty_access.modules.users.repos import RevokedTokenRepository, UserRepository


logger = structlog.get_logger()

# HTTP Bearer token security scheme
bearer_scheme = HTTPBearer(auto_error=False)


async def get_credential(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str | None:
    """Extract the raw access credential.

    The ``Authorization: Bearer`` header wins; the access token cookie
    is the fallback.

    Args:
        request: The incoming request
        credentials: Bearer credentials, if the header was sent

    Returns:
        The raw credential, or None when none was presented
    """
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.access_token_cookie_name) or None


Credential = Annotated[str | None, Depends(get_credential)]


@dataclass(frozen=True)
class GateOptions:
    """Declarative checks for one route.

    Attributes:
        require_auth: A valid credential must be presented
        require_admin: The caller's role must be admin
        permissions: Capability tokens the caller needs
        mode: ALL to need every token, ANY to need at least one
    """

    require_auth: bool = False
    require_admin: bool = False
    permissions: tuple[str, ...] = ()
    mode: MatchMode = MatchMode.ALL

    @property
    def demands_identity(self) -> bool:
        return self.require_auth or self.require_admin or bool(self.permissions)


class RequestGate:
    """Authentication and authorization checkpoint for one route.

    Returns the decoded identity, or None for anonymous access on routes
    that do not demand one. Every failure raises immediately; nothing is
    written and nothing is retried.
    """

    def __init__(self, options: GateOptions) -> None:
        self.options = options

    async def __call__(
        self,
        request: Request,
        db: DBSession,
        token: Credential,
    ) -> TokenData | None:
        options = self.options

        if token is None:
            if not options.demands_identity:
                return None
            raise NoTokenError()

        # A revoked credential is rejected even where auth is optional
        if await RevokedTokenRepository(db).is_revoked(hash_token(token)):
            raise TokenBlacklistedError()

        identity = verify_access_token(token)

        if options.demands_identity:
            # Role and status may have changed since the credential was issued
            user = await UserRepository(db).get_by_id(identity.user_id)
            if user is None:
                raise UserNotFoundError()
            if user.is_banned:
                raise UserBannedError()

        if options.require_admin and identity.role != Role.ADMIN:
            raise AdminRequiredError()

        if options.permissions:
            decision = await PermissionChecker(db).check(
                identity.user_id,
                identity.role,
                options.permissions,
                options.mode,
            )
            if not decision.allowed:
                raise PermissionDeniedError(
                    decision.reason,
                    required=options.permissions,
                    mode=options.mode.value,
                )

        request.state.identity = identity
        request.state.user_id = identity.user_id
        structlog.contextvars.bind_contextvars(
            user_id=str(identity.user_id),
            role=identity.role.value,
        )
        return identity


def make_gate(
    *,
    require_auth: bool = False,
    require_admin: bool = False,
    permissions: list[str] | tuple[str, ...] = (),
    mode: MatchMode = MatchMode.ALL,
) -> RequestGate:
    """Build a request gate for a route.

    Usage:
        @router.get("/stats")
        async def stats(
            identity: Annotated[TokenData, Depends(make_gate(permissions=["view_statistics"]))],
        ):
            ...

    Args:
        require_auth: A valid credential must be presented
        require_admin: The caller's role must be admin
        permissions: Capability tokens the caller needs
        mode: ALL or ANY

    Returns:
        A dependency callable
    """
    return RequestGate(
        GateOptions(
            require_auth=require_auth,
            require_admin=require_admin,
            permissions=tuple(permissions),
            mode=mode,
        )
    )


# Type alias for cleaner dependency injection
CurrentIdentity = Annotated[TokenData, Depends(make_gate(require_auth=True))]
