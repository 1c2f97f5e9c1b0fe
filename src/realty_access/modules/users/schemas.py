"""Pydantic schemas for user data exposed by the admin API."""

from uuid import UUID

from realty_access.core.responses import CamelModel
from realty_access.modules.users.enums import Role, UserStatus


class UserSummary(CamelModel):
    """Schema for a user as listed in the admin panel."""

    id: UUID
    username: str
    email: str
    role: Role
    status: UserStatus
