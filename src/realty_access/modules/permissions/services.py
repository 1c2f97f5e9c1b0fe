"""Permission administration service.

Reads and writes grant sets on behalf of administrators, and keeps
employee grant sets consistent with the configured defaults.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from realty_access.api.dependencies import DBSession
from realty_access.core.auth.schemas import TokenData
from realty_access.core.errors import (
    ConflictError,
    InvalidPermissionsError,
    NotEmployeeError,
    NotFoundError,
    PermissionDeniedError,
)
from realty_access.core.permissions.catalogue import PermissionCatalogue, get_catalogue
from realty_access.core.permissions.repos import GrantRepository, normalize_permissions
from realty_access.modules.permissions.schemas import (
    AvailablePermissions,
    EmployeeList,
    EmployeePermissions,
    EmployeePermissionsResult,
    UserPermissions,
    UserPermissionsList,
    UserWithPermissions,
)
from realty_access.modules.users.enums import Role
from realty_access.modules.users.models import User
from realty_access.modules.users.repos import UserRepository


logger = structlog.get_logger()


@dataclass
class BackfillResult:
    """Counts from restoring default grants to every employee."""

    processed: int = 0
    updated: int = 0
    unchanged: int = 0
    failed: list[UUID] = field(default_factory=list)


class PermissionService:
    """Service for permission administration.

    All writes go through the grant store as full replacements; nothing
    here merges into an existing grant set.
    """

    def __init__(self, db: DBSession) -> None:
        self.db = db
        self.catalogue: PermissionCatalogue = get_catalogue()
        self.users = UserRepository(db)
        self.grants = GrantRepository(db)

    async def _get_user(self, user_id: UUID) -> User:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found", resource="user", resource_id=str(user_id))
        return user

    @staticmethod
    def _already_granted(user_id: UUID) -> ConflictError:
        return ConflictError(
            "Permissions already exist for this user",
            details={"user_id": str(user_id)},
        )

    def available(self) -> AvailablePermissions:
        """Return the capability catalogue grouped by domain."""
        catalogue = self.catalogue
        return AvailablePermissions(
            permissions={name: list(tokens) for name, tokens in catalogue.groups.items()},
            all_permissions=sorted(catalogue.all_permissions),
            employee_default_permissions=list(catalogue.employee_defaults),
            employee_manageable_permissions=list(catalogue.employee_manageable),
        )

    async def get_user_permissions(
        self, user_id: UUID, caller: TokenData
    ) -> UserPermissions:
        """Read a user's grant set.

        Args:
            user_id: The target user
            caller: The authenticated caller

        Returns:
            The grants in stored order, empty when the user has no record

        Raises:
            PermissionDeniedError: If the caller is neither admin nor the target
            NotFoundError: If the user does not exist
        """
        if caller.role != Role.ADMIN and caller.user_id != user_id:
            raise PermissionDeniedError("You can only view your own permissions")

        await self._get_user(user_id)
        permissions = await self.grants.list_grants(user_id)
        return UserPermissions(user_id=user_id, permissions=permissions)

    async def replace_user_permissions(
        self, user_id: UUID, permissions: Sequence[str]
    ) -> UserPermissions:
        """Overwrite a user's grant set, creating it if absent.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = await self._get_user(user_id)
        if user.role == Role.USER and permissions:
            logger.warning(
                "grants_assigned_to_regular_user",
                user_id=str(user_id),
                permissions=list(permissions),
            )

        record = await self.grants.replace(user_id, permissions)
        logger.info(
            "user_permissions_replaced",
            user_id=str(user_id),
            permissions=record.permissions,
        )
        return UserPermissions(user_id=user_id, permissions=list(record.permissions))

    async def create_user_permissions(
        self, user_id: UUID, permissions: Sequence[str]
    ) -> UserPermissions:
        """Create a grant set for a user that has none.

        Raises:
            NotFoundError: If the user does not exist
            ConflictError: If the user already has a grant set
        """
        await self._get_user(user_id)
        if await self.grants.get(user_id) is not None:
            raise self._already_granted(user_id)

        try:
            async with self.db.begin_nested():
                record = await self.grants.create(user_id, permissions)
        except IntegrityError as e:
            # A concurrent create for the same user got there first
            raise self._already_granted(user_id) from e

        logger.info(
            "user_permissions_created",
            user_id=str(user_id),
            permissions=record.permissions,
        )
        return UserPermissions(user_id=user_id, permissions=list(record.permissions))

    async def delete_user_permissions(self, user_id: UUID) -> None:
        """Remove a user's grant set.

        Raises:
            NotFoundError: If the user or their grant set does not exist
        """
        await self._get_user(user_id)
        if not await self.grants.delete(user_id):
            raise NotFoundError(
                "No permissions found for this user",
                resource="user_permissions",
                resource_id=str(user_id),
            )
        logger.info("user_permissions_deleted", user_id=str(user_id))

    async def list_users(self) -> UserPermissionsList:
        """List every non-admin user with their stored grants."""
        users = await self.users.list_non_admins()
        grant_lists = await self.grants.load_grants_for([user.id for user in users])
        return UserPermissionsList(
            users=[
                UserWithPermissions(
                    id=user.id,
                    username=user.username,
                    email=user.email,
                    role=user.role,
                    status=user.status,
                    created_at=user.created_at,
                    permissions=grant_lists[user.id],
                )
                for user in users
            ]
        )

    async def list_employees(self) -> EmployeeList:
        """List every employee with their grants split against the defaults."""
        employees = await self.users.list_by_role(Role.EMPLOYEE)
        grant_lists = await self.grants.load_grants_for([user.id for user in employees])

        defaults = self.catalogue.employee_defaults
        manageable = self.catalogue.employee_manageable
        items = []
        for user in employees:
            permissions = grant_lists[user.id]
            grants = set(permissions)
            items.append(
                EmployeePermissions(
                    id=user.id,
                    username=user.username,
                    email=user.email,
                    role=user.role,
                    status=user.status,
                    permissions=permissions,
                    default_permissions=list(defaults),
                    enabled_permissions=[p for p in manageable if p in grants],
                    missing_default_permissions=[p for p in defaults if p not in grants],
                )
            )

        return EmployeeList(
            employees=items,
            manageable_permissions=list(manageable),
            default_permissions=list(defaults),
        )

    async def update_employee_permissions(
        self, user_id: UUID, permissions: Sequence[str]
    ) -> EmployeePermissionsResult:
        """Set an employee's grants to the defaults plus the chosen extras.

        The whole request is rejected if any token is outside the
        manageable set; nothing is written in that case.

        Raises:
            NotFoundError: If the user does not exist
            NotEmployeeError: If the user is not an employee
            InvalidPermissionsError: If a token is not manageable
        """
        user = await self._get_user(user_id)
        if user.role != Role.EMPLOYEE:
            raise NotEmployeeError()

        requested = normalize_permissions(permissions)
        invalid = self.catalogue.not_manageable(requested)
        if invalid:
            raise InvalidPermissionsError(invalid)

        final = normalize_permissions([*self.catalogue.employee_defaults, *requested])
        record = await self.grants.replace(user_id, final)
        logger.info(
            "employee_permissions_updated",
            user_id=str(user_id),
            added_permissions=requested,
        )
        return EmployeePermissionsResult(
            user_id=user_id,
            permissions=list(record.permissions),
            added_permissions=requested,
        )

    async def backfill_employee_defaults(self) -> BackfillResult:
        """Add any missing default grants to every employee.

        Existing extra grants are kept. Each employee is written in its
        own savepoint; a failure is logged and the run moves on.

        Returns:
            Counts of processed, updated, unchanged and failed employees
        """
        result = BackfillResult()
        defaults = self.catalogue.employee_defaults

        employees = await self.users.list_by_role(Role.EMPLOYEE)
        for user_id in [user.id for user in employees]:
            result.processed += 1
            try:
                async with self.db.begin_nested():
                    record = await self.grants.get(user_id)
                    current = list(record.permissions) if record else []
                    missing = [p for p in defaults if p not in current]
                    if not missing:
                        result.unchanged += 1
                        continue
                    await self.grants.replace(user_id, [*current, *missing])
                result.updated += 1
                logger.info(
                    "employee_defaults_restored",
                    user_id=str(user_id),
                    added_permissions=missing,
                )
            except SQLAlchemyError as e:
                result.failed.append(user_id)
                logger.error(
                    "employee_defaults_restore_failed",
                    user_id=str(user_id),
                    error=str(e),
                )

        logger.info(
            "employee_defaults_backfill_complete",
            processed=result.processed,
            updated=result.updated,
            unchanged=result.unchanged,
            failed=len(result.failed),
        )
        return result


# Type alias for dependency injection
PermissionSvc = Annotated[PermissionService, Depends(PermissionService)]
