"""Capability token catalogue.

The closed list of tokens the admin panel knows about, grouped by domain,
plus the split of employee tokens into defaults (always held) and
manageable (toggled per employee by an administrator).
"""

from dataclasses import dataclass
from functools import lru_cache

from realty_access.config import settings


PERMISSION_GROUPS: dict[str, tuple[str, ...]] = {
    "users": (
        "view_users",
        "create_user",
        "edit_user",
        "delete_user",
        "change_user_role",
        "change_user_status",
        "reset_user_password",
        "approve_user",
    ),
    "posts": (
        "view_posts",
        "create_post",
        "edit_post",
        "delete_post",
        "approve_post",
        "reject_post",
        "feature_post",
        "view_deleted_posts",
        "restore_post",
    ),
    "projects": (
        "view_projects",
        "create_project",
        "edit_project",
        "delete_project",
    ),
    "news": (
        "view_news",
        "create_news",
        "edit_news",
        "delete_news",
        "feature_news",
        "publish_news",
        "manage_news_categories",
    ),
    "transactions": ("view_transactions",),
    "statistics": (
        "view_dashboard",
        "view_statistics",
        "export_statistics",
        "generate_reports",
        "view_financial_stats",
    ),
    "settings": (
        "view_settings",
        "edit_settings",
        "manage_sidebar",
        "manage_header",
        "manage_categories",
    ),
    "locations": (
        "view_locations",
        "manage_locations",
        "manage_areas",
        "manage_prices",
    ),
}

# Tokens an administrator may toggle for an employee. Anything also listed
# in the configured defaults is removed from this set at load time.
EMPLOYEE_TOGGLEABLE_PERMISSIONS: tuple[str, ...] = (
    "create_user",
    "edit_user",
    "delete_user",
    "change_user_status",
    "change_user_role",
    "create_post",
    "edit_post",
    "delete_post",
    "approve_post",
    "reject_post",
    "feature_post",
    "create_project",
    "edit_project",
    "delete_project",
    "create_news",
    "edit_news",
    "delete_news",
    "feature_news",
    "manage_news_categories",
    "view_transactions",
    "view_dashboard",
    "view_statistics",
    "export_statistics",
    "generate_reports",
    "edit_settings",
    "manage_categories",
    "manage_locations",
    "manage_areas",
    "manage_prices",
)


class CatalogueError(ValueError):
    """Raised when the configured default tokens are not catalogue members."""


@dataclass(frozen=True)
class PermissionCatalogue:
    """Resolved catalogue for the running configuration.

    Attributes:
        groups: Every token, grouped by domain
        employee_defaults: Tokens every employee holds, in configured order
        employee_manageable: Tokens an administrator may toggle per employee
    """

    groups: dict[str, tuple[str, ...]]
    employee_defaults: tuple[str, ...]
    employee_manageable: tuple[str, ...]

    @property
    def all_permissions(self) -> frozenset[str]:
        return frozenset(token for tokens in self.groups.values() for token in tokens)

    def not_manageable(self, tokens: list[str]) -> list[str]:
        """Tokens an administrator may not toggle for an employee, in input order."""
        allowed = set(self.employee_manageable)
        return [token for token in dict.fromkeys(tokens) if token not in allowed]


def build_catalogue(employee_defaults: list[str]) -> PermissionCatalogue:
    """Build the catalogue around a list of default employee tokens.

    Args:
        employee_defaults: The configured default employee tokens

    Returns:
        The resolved catalogue

    Raises:
        CatalogueError: If a default token is not in the catalogue
    """
    known = {token for tokens in PERMISSION_GROUPS.values() for token in tokens}
    unknown = [token for token in employee_defaults if token not in known]
    if unknown:
        raise CatalogueError(
            f"Unknown default employee permissions: {', '.join(unknown)}"
        )

    defaults = tuple(dict.fromkeys(employee_defaults))
    manageable = tuple(
        token for token in EMPLOYEE_TOGGLEABLE_PERMISSIONS if token not in defaults
    )
    return PermissionCatalogue(
        groups=dict(PERMISSION_GROUPS),
        employee_defaults=defaults,
        employee_manageable=manageable,
    )


@lru_cache
def get_catalogue() -> PermissionCatalogue:
    """Get the catalogue for the configured default employee tokens."""
    return build_catalogue(settings.employee_default_permissions)
