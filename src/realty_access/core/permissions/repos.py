"""Grant store: persistence for per-user permission grants.

``load_grants`` is the single place where "no record" and "empty record"
collapse into the same empty set; callers never see ``None``.
"""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from realty_access.core.permissions.models import UserPermission


def normalize_permissions(tokens: Iterable[str]) -> list[str]:
    """De-duplicate tokens, keeping first-seen order."""
    return list(dict.fromkeys(tokens))


class GrantRepository:
    """Repository for UserPermission rows.

    The store does not check tokens against the catalogue; which tokens
    may be granted to whom is decided by the administration service.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, user_id: UUID) -> UserPermission | None:
        """Get the grant record for a user, if one exists.

        Args:
            user_id: The owning user's UUID

        Returns:
            The record, or None when the user has never been granted anything
        """
        stmt = select(UserPermission).where(UserPermission.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_grants(self, user_id: UUID) -> list[str]:
        """Load a user's granted tokens in stored order.

        Args:
            user_id: The owning user's UUID

        Returns:
            The granted tokens; empty when no record exists
        """
        stmt = select(UserPermission.permissions).where(UserPermission.user_id == user_id)
        result = await self.session.execute(stmt)
        return list(result.scalar_one_or_none() or ())

    async def load_grants(self, user_id: UUID) -> frozenset[str]:
        """Load a user's grant set for evaluation."""
        return frozenset(await self.list_grants(user_id))

    async def load_grants_for(self, user_ids: list[UUID]) -> dict[UUID, list[str]]:
        """Load grants for several users in one query.

        Args:
            user_ids: The owning users' UUIDs

        Returns:
            Tokens in stored order, with an entry (possibly empty) for every
            requested user
        """
        grants: dict[UUID, list[str]] = {user_id: [] for user_id in user_ids}
        if not user_ids:
            return grants

        stmt = select(UserPermission).where(UserPermission.user_id.in_(user_ids))
        result = await self.session.execute(stmt)
        for record in result.scalars().all():
            grants[record.user_id] = list(record.permissions or ())
        return grants

    async def create(self, user_id: UUID, permissions: Iterable[str]) -> UserPermission:
        """Insert a new grant record.

        Args:
            user_id: The owning user's UUID
            permissions: Tokens to grant

        Returns:
            The created record
        """
        record = UserPermission(
            user_id=user_id,
            permissions=normalize_permissions(permissions),
        )
        self.session.add(record)
        await self.session.flush()
        await self.session.refresh(record)
        return record

    async def replace(self, user_id: UUID, permissions: Iterable[str]) -> UserPermission:
        """Overwrite a user's grants, creating the record if absent.

        Full replace, not merge. Concurrent replaces for the same user
        resolve as last write wins.

        Args:
            user_id: The owning user's UUID
            permissions: The complete new set of tokens

        Returns:
            The stored record
        """
        record = await self.get(user_id)
        if record is None:
            return await self.create(user_id, permissions)

        # Assign a fresh list so the JSON column is marked dirty
        record.permissions = normalize_permissions(permissions)
        await self.session.flush()
        await self.session.refresh(record)
        return record

    async def delete(self, user_id: UUID) -> bool:
        """Delete a user's grant record.

        Args:
            user_id: The owning user's UUID

        Returns:
            True if a record was deleted, False if none existed
        """
        result = await self.session.execute(
            delete(UserPermission).where(UserPermission.user_id == user_id)
        )
        await self.session.flush()
        return bool(result.rowcount)
