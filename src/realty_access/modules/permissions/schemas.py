"""Pydantic schemas for the permission administration API."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from realty_access.core.responses import CamelModel
from realty_access.modules.users.schemas import UserSummary


# ============================================================
# Requests
# ============================================================


class PermissionsUpdate(CamelModel):
    """Schema for replacing a grant set."""

    permissions: list[str]


class PermissionsCreate(CamelModel):
    """Schema for creating a grant set for a user without one."""

    user_id: UUID
    permissions: list[str] = Field(default_factory=list)


# ============================================================
# Responses
# ============================================================


class AvailablePermissions(CamelModel):
    """The capability catalogue."""

    permissions: dict[str, list[str]]
    all_permissions: list[str]
    employee_default_permissions: list[str]
    employee_manageable_permissions: list[str]


class UserPermissions(CamelModel):
    """A user's grant set."""

    user_id: UUID
    permissions: list[str]


class UserWithPermissions(UserSummary):
    """A non-admin user with their stored grants."""

    created_at: datetime
    permissions: list[str]


class UserPermissionsList(CamelModel):
    """Every non-admin user with their grants."""

    users: list[UserWithPermissions]


class EmployeePermissions(UserSummary):
    """An employee with their grants split into defaults and extras."""

    permissions: list[str]
    default_permissions: list[str]
    enabled_permissions: list[str]
    missing_default_permissions: list[str]


class EmployeeList(CamelModel):
    """All employees plus the token sets used to render the toggles."""

    employees: list[EmployeePermissions]
    manageable_permissions: list[str]
    default_permissions: list[str]


class EmployeePermissionsResult(CamelModel):
    """Outcome of an employee permission update."""

    user_id: UUID
    permissions: list[str]
    added_permissions: list[str]
