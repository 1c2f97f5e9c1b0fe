"""User repository for database operations."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from realty_access.modules.users.enums import Role
from realty_access.modules.users.models import RevokedToken, User


class UserRepository:
    """Repository for User database operations.

    Read-only from the point of view of the permission layer: role and
    status are changed by account management, not here.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, user: User) -> User:
        """Create a new user.

        Args:
            user: User instance to create

        Returns:
            The created user with ID populated
        """
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def get_by_id(self, user_id: UUID) -> User | None:
        """Get a user by ID.

        Args:
            user_id: The user's UUID

        Returns:
            User if found, None otherwise
        """
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        """Get a user by email address.

        Args:
            email: The user's email

        Returns:
            User if found, None otherwise
        """
        result = await self.session.execute(
            select(User).where(User.email == email.lower())
        )
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> User | None:
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def list_by_role(self, role: Role) -> list[User]:
        """List all users holding a role, oldest first.

        Args:
            role: The role to filter on

        Returns:
            Users with that role
        """
        stmt = select(User).where(User.role == role).order_by(User.created_at, User.username)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_non_admins(self) -> list[User]:
        """List every user whose role is not admin, oldest first."""
        stmt = (
            select(User)
            .where(User.role != Role.ADMIN)
            .order_by(User.created_at, User.username)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class RevokedTokenRepository:
    """Repository for the access-credential revocation list."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def is_revoked(self, token_hash: str) -> bool:
        """Check whether a credential hash is on the revocation list.

        Args:
            token_hash: SHA-256 hash of the raw credential

        Returns:
            True if the credential was revoked
        """
        stmt = select(RevokedToken.id).where(RevokedToken.token_hash == token_hash)
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def revoke(self, token_hash: str, expires_at: datetime) -> None:
        """Add a credential hash to the revocation list.

        Revoking an already revoked credential is a no-op.

        Args:
            token_hash: SHA-256 hash of the raw credential
            expires_at: When the credential expires on its own
        """
        if await self.is_revoked(token_hash):
            return
        self.session.add(RevokedToken(token_hash=token_hash, expires_at=expires_at))
        await self.session.flush()

    async def cleanup_expired(self, before: datetime) -> int:
        """Delete revocation entries for credentials that have expired.

        Args:
            before: Delete entries whose credential expired before this time

        Returns:
            Number of entries deleted
        """
        result = await self.session.execute(
            delete(RevokedToken).where(RevokedToken.expires_at < before)
        )
        await self.session.flush()
        return result.rowcount or 0
