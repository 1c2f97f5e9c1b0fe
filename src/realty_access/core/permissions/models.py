"""Permission grant database model.

One optional row per user holding the capability tokens explicitly
granted to that user. A missing row means no grants.
"""

from uuid import UUID

from sqlalchemy import JSON, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from realty_access.core.database.base import Base, TimestampMixin, UUIDMixin


class UserPermission(Base, UUIDMixin, TimestampMixin):
    """Grant set owned by exactly one user.

    Attributes:
        user_id: The owning user (unique)
        permissions: Capability tokens, de-duplicated, first-seen order
    """

    __tablename__ = "user_permissions"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    permissions: Mapped[list[str]] = mapped_column(
        JSON,
        default=list,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<UserPermission(user_id={self.user_id}, count={len(self.permissions or [])})>"
