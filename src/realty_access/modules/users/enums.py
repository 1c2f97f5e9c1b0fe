"""Identity enums shared by the users and permissions layers."""

from enum import StrEnum


class Role(StrEnum):
    """Account role. Changed only through identity management, never here."""

    USER = "user"
    ADMIN = "admin"
    EMPLOYEE = "employee"


class UserStatus(StrEnum):
    """Account status. Banned accounts fail every gated request."""

    ACTIVE = "active"
    BANNED = "banned"
