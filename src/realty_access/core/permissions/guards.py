"""Permission guards for route protection.

Thin factories over ``make_gate`` for the common route configurations.

Usage:
    @router.get("/statistics")
    async def statistics(identity: Annotated[TokenData, require_permission("view_statistics")]):
        ...
"""

from typing import Any

from fastapi import Depends

from realty_access.core.auth.dependencies import make_gate
from realty_access.core.permissions.checker import MatchMode


def optional_auth() -> Any:
    """Identity if a credential is presented, anonymous otherwise."""
    return Depends(make_gate())


def require_auth() -> Any:
    """Any authenticated, non-banned caller."""
    return Depends(make_gate(require_auth=True))


def require_admin() -> Any:
    """Callers whose role is admin."""
    return Depends(make_gate(require_admin=True))


def require_permission(permission: str) -> Any:
    """Callers holding one capability token (admins always pass)."""
    return Depends(make_gate(permissions=[permission]))


def require_all_permissions(permissions: list[str]) -> Any:
    """Callers holding every listed token (admins always pass)."""
    return Depends(make_gate(permissions=permissions, mode=MatchMode.ALL))


def require_any_permission(permissions: list[str]) -> Any:
    """Callers holding at least one listed token (admins always pass)."""
    return Depends(make_gate(permissions=permissions, mode=MatchMode.ANY))
