"""Authentication service for login, logout and identity lookup."""

from typing import Annotated

import structlog
from fastapi import Depends

from realty_access.api.dependencies import DBSession
from realty_access.config import settings
from realty_access.core.auth.backend import (
    create_access_token,
    hash_token,
    verify_password,
)
from realty_access.core.auth.schemas import AccessTokenResponse, IdentityResponse, TokenData
from realty_access.core.errors import InvalidCredentialsError, UserBannedError
from realty_access.core.permissions.repos import GrantRepository
from realty_access.modules.users.repos import RevokedTokenRepository, UserRepository


logger = structlog.get_logger()


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: DBSession) -> None:
        self.db = db
        self.user_repo = UserRepository(db)
        self.revoked_repo = RevokedTokenRepository(db)
        self.grant_repo = GrantRepository(db)

    async def login(self, email: str, password: str) -> AccessTokenResponse:
        """Authenticate a user with email and password.

        Args:
            email: User's email address
            password: Plain text password

        Returns:
            A fresh access credential

        Raises:
            InvalidCredentialsError: If the email or password is wrong
            UserBannedError: If the account is banned
        """
        user = await self.user_repo.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        if user.is_banned:
            raise UserBannedError()

        access_token = create_access_token(
            user_id=user.id,
            username=user.username,
            email=user.email,
            role=user.role,
        )
        logger.info("user_logged_in", user_id=str(user.id), role=user.role.value)

        return AccessTokenResponse(
            access_token=access_token,
            expires_in=settings.access_token_expire_minutes * 60,
        )

    async def logout(self, token: str, identity: TokenData) -> None:
        """Invalidate the presented access credential until it expires.

        Args:
            token: The raw credential being retired
            identity: The claim decoded from that credential
        """
        await self.revoked_repo.revoke(hash_token(token), identity.exp)
        logger.info("user_logged_out", user_id=str(identity.user_id))

    async def describe(self, identity: TokenData) -> IdentityResponse:
        """Return the caller's identity with their resolved grants.

        Args:
            identity: The decoded identity claim

        Returns:
            Identity with its grant tokens in stored order
        """
        permissions = await self.grant_repo.list_grants(identity.user_id)
        return IdentityResponse(
            user_id=identity.user_id,
            username=identity.username,
            email=identity.email,
            role=identity.role,
            permissions=permissions,
        )


# Type alias for dependency injection
AuthSvc = Annotated[AuthService, Depends(AuthService)]
