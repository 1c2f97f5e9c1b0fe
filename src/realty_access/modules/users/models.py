"""User database models."""

from datetime import datetime
from enum import StrEnum

from sqlalchemy import DateTime, Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from realty_access.core.constants import (
    MAX_EMAIL_LENGTH,
    MAX_ENUM_LENGTH,
    MAX_USERNAME_LENGTH,
    SHA256_HEX_LENGTH,
)
from realty_access.core.database.base import Base, TimestampMixin, UUIDMixin
from realty_access.modules.users.enums import Role, UserStatus


def _enum_values(enum_cls: type[StrEnum]) -> list[str]:
    return [member.value for member in enum_cls]


class User(Base, UUIDMixin, TimestampMixin):
    """Identity record for one account.

    Attributes:
        username: Unique display handle
        email: Unique email address
        password_hash: Bcrypt-hashed password
        role: user, admin or employee
        status: active or banned
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(
        String(MAX_USERNAME_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    email: Mapped[str] = mapped_column(
        String(MAX_EMAIL_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    role: Mapped[Role] = mapped_column(
        Enum(
            Role,
            name="user_role",
            native_enum=False,
            length=MAX_ENUM_LENGTH,
            values_callable=_enum_values,
        ),
        default=Role.USER,
        nullable=False,
        index=True,
    )
    status: Mapped[UserStatus] = mapped_column(
        Enum(
            UserStatus,
            name="user_status",
            native_enum=False,
            length=MAX_ENUM_LENGTH,
            values_callable=_enum_values,
        ),
        default=UserStatus.ACTIVE,
        nullable=False,
    )

    @property
    def is_banned(self) -> bool:
        return self.status == UserStatus.BANNED

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username}, role={self.role})>"


class RevokedToken(Base, UUIDMixin, TimestampMixin):
    """Revoked access credentials.

    Stores the SHA-256 hash of each credential invalidated by logout.
    Rows are removed by the token cleanup command once the credential
    would have expired on its own.

    Attributes:
        token_hash: SHA-256 hash of the raw credential
        expires_at: When the original credential expires
    """

    __tablename__ = "revoked_tokens"

    token_hash: Mapped[str] = mapped_column(
        String(SHA256_HEX_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<RevokedToken(id={self.id}, token_hash={self.token_hash[:8]}...)>"
