"""Permission checking logic.

``evaluate`` is the single authorization decision: admin bypass,
empty requirement, then ALL/ANY membership against the grant set.
``PermissionChecker`` feeds it from the grant store and skips the
store read entirely when the role bypasses grants.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from realty_access.core.permissions.repos import GrantRepository
from realty_access.modules.users.enums import Role


logger = structlog.get_logger()

DENIED_ALL_MESSAGE = "You don't have all the required permissions for this action."
DENIED_ANY_MESSAGE = "You don't have any of the required permissions for this action."


class MatchMode(StrEnum):
    """How a list of required tokens is matched against a grant set."""

    ALL = "all"
    ANY = "any"


@dataclass(frozen=True)
class Decision:
    """Outcome of an authorization check.

    Attributes:
        allowed: Whether the request may proceed
        reason: Denial message, distinct per match mode
        missing: Required tokens absent from the grant set
        bypassed: True when the role skipped the grant check
    """

    allowed: bool
    reason: str | None = None
    missing: tuple[str, ...] = field(default_factory=tuple)
    bypassed: bool = False


def bypasses_grants(role: Role) -> bool:
    """Whether a role satisfies every capability check without grants."""
    return role == Role.ADMIN


def evaluate(
    role: Role,
    grants: frozenset[str],
    required: Sequence[str],
    mode: MatchMode = MatchMode.ALL,
) -> Decision:
    """Decide whether a role with a grant set satisfies a requirement.

    Args:
        role: The caller's role
        grants: The caller's grant set (empty when no record exists)
        required: Tokens the route needs
        mode: ALL to need every token, ANY to need at least one

    Returns:
        The decision
    """
    if bypasses_grants(role):
        return Decision(allowed=True, bypassed=True)

    if not required:
        return Decision(allowed=True)

    missing = tuple(token for token in required if token not in grants)

    if mode == MatchMode.ANY:
        if len(missing) < len(required):
            return Decision(allowed=True)
        return Decision(allowed=False, reason=DENIED_ANY_MESSAGE, missing=missing)

    if not missing:
        return Decision(allowed=True)
    return Decision(allowed=False, reason=DENIED_ALL_MESSAGE, missing=missing)


class PermissionChecker:
    """Service for checking user permissions against the grant store."""

    def __init__(self, session: AsyncSession) -> None:
        self.grants = GrantRepository(session)

    async def check(
        self,
        user_id: UUID,
        role: Role,
        required: Sequence[str],
        mode: MatchMode = MatchMode.ALL,
    ) -> Decision:
        """Check whether a user satisfies a requirement.

        Args:
            user_id: The user's UUID
            role: The user's role
            required: Tokens the route needs
            mode: ALL or ANY

        Returns:
            The decision
        """
        if bypasses_grants(role) or not required:
            decision = evaluate(role, frozenset(), required, mode)
        else:
            grants = await self.grants.load_grants(user_id)
            decision = evaluate(role, grants, required, mode)

        if decision.bypassed and required:
            logger.info(
                "admin_bypass",
                user_id=str(user_id),
                permissions=list(required),
                mode=mode.value,
            )
        elif not decision.allowed:
            logger.warning(
                "permission_denied",
                user_id=str(user_id),
                role=role.value,
                permissions=list(required),
                missing=list(decision.missing),
                mode=mode.value,
            )

        return decision

