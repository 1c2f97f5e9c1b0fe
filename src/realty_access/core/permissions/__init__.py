"""Permission grants, the capability catalogue and the authorization evaluator."""

from realty_access.core.permissions.catalogue import (
    PermissionCatalogue,
    build_catalogue,
    get_catalogue,
)
from realty_access.core.permissions.checker import (
    Decision,
    MatchMode,
    PermissionChecker,
    evaluate,
)
from realty_access.core.permissions.models import UserPermission
from realty_access.core.permissions.repos import GrantRepository


__all__ = [
    "Decision",
    "GrantRepository",
    "MatchMode",
    "PermissionCatalogue",
    "PermissionChecker",
    "UserPermission",
    "build_catalogue",
    "evaluate",
    "get_catalogue",
]
