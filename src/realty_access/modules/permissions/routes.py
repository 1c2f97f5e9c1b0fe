"""Permission administration API routes.

Each endpoint is guarded by one capability token; admins pass every
guard. Reading a single grant set is open to the admin and to the user
themselves.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, status

from realty_access.core.auth.dependencies import CurrentIdentity
from realty_access.core.auth.schemas import TokenData
from realty_access.core.permissions.guards import require_permission
from realty_access.core.responses import ApiResponse
from realty_access.modules.permissions.schemas import (
    AvailablePermissions,
    EmployeeList,
    EmployeePermissionsResult,
    PermissionsCreate,
    PermissionsUpdate,
    UserPermissions,
    UserPermissionsList,
)
from realty_access.modules.permissions.services import PermissionSvc


router = APIRouter(prefix="/permissions", tags=["permissions"])

SettingsViewer = Annotated[TokenData, require_permission("view_settings")]
UserViewer = Annotated[TokenData, require_permission("view_users")]
RoleManager = Annotated[TokenData, require_permission("change_user_role")]


@router.get(
    "/available",
    response_model=ApiResponse[AvailablePermissions],
    summary="List the capability catalogue",
)
async def get_available_permissions(
    _: SettingsViewer,
    service: PermissionSvc,
) -> ApiResponse[AvailablePermissions]:
    return ApiResponse(
        message="Available permissions retrieved successfully",
        data=service.available(),
    )


@router.get(
    "/users",
    response_model=ApiResponse[UserPermissionsList],
    summary="List non-admin users with their permissions",
)
async def get_users_with_permissions(
    _: UserViewer,
    service: PermissionSvc,
) -> ApiResponse[UserPermissionsList]:
    data = await service.list_users()
    return ApiResponse(message="Users retrieved successfully", data=data)


@router.get(
    "/employees",
    response_model=ApiResponse[EmployeeList],
    summary="List employees with their permissions",
)
async def get_employees_with_permissions(
    _: UserViewer,
    service: PermissionSvc,
) -> ApiResponse[EmployeeList]:
    data = await service.list_employees()
    return ApiResponse(message="Employees retrieved successfully", data=data)


@router.put(
    "/employee/{user_id}",
    response_model=ApiResponse[EmployeePermissionsResult],
    summary="Set an employee's extra permissions",
    description=(
        "Grant the employee the default permissions plus the supplied manageable "
        "ones. Rejected as a whole if any supplied token is not manageable."
    ),
)
async def update_employee_permissions(
    user_id: UUID,
    data: PermissionsUpdate,
    _: RoleManager,
    service: PermissionSvc,
) -> ApiResponse[EmployeePermissionsResult]:
    result = await service.update_employee_permissions(user_id, data.permissions)
    return ApiResponse(message="Employee permissions updated successfully", data=result)


@router.get(
    "/user/{user_id}",
    response_model=ApiResponse[UserPermissions],
    summary="Get a user's permissions",
)
async def get_user_permissions(
    user_id: UUID,
    identity: CurrentIdentity,
    service: PermissionSvc,
) -> ApiResponse[UserPermissions]:
    data = await service.get_user_permissions(user_id, identity)
    return ApiResponse(message="User permissions retrieved successfully", data=data)


@router.put(
    "/user/{user_id}",
    response_model=ApiResponse[UserPermissions],
    summary="Replace a user's permissions",
)
async def update_user_permissions(
    user_id: UUID,
    data: PermissionsUpdate,
    _: RoleManager,
    service: PermissionSvc,
) -> ApiResponse[UserPermissions]:
    result = await service.replace_user_permissions(user_id, data.permissions)
    return ApiResponse(message="User permissions updated successfully", data=result)


@router.post(
    "/user",
    response_model=ApiResponse[UserPermissions],
    status_code=status.HTTP_201_CREATED,
    summary="Create a user's permissions",
)
async def create_user_permissions(
    data: PermissionsCreate,
    _: RoleManager,
    service: PermissionSvc,
) -> ApiResponse[UserPermissions]:
    result = await service.create_user_permissions(data.user_id, data.permissions)
    return ApiResponse(message="User permissions created successfully", data=result)


@router.delete(
    "/user/{user_id}",
    response_model=ApiResponse[None],
    summary="Delete a user's permissions",
)
async def delete_user_permissions(
    user_id: UUID,
    _: RoleManager,
    service: PermissionSvc,
) -> ApiResponse[None]:
    await service.delete_user_permissions(user_id)
    return ApiResponse(message="User permissions deleted successfully")
