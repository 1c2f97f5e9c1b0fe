"""Authentication schemas for token handling."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from realty_access.core.responses import CamelModel
from realty_access.modules.users.enums import Role


class TokenData(BaseModel):
    """Identity claim decoded from an access credential.

    Attributes:
        user_id: The user's UUID
        username: Display name at issue time
        email: Email at issue time
        role: Role at issue time
        exp: Token expiration time
        type: Token type (always access for the gate)
        jti: Unique token ID
    """

    user_id: UUID
    username: str
    email: str
    role: Role
    exp: datetime
    type: str = "access"
    jti: str | None = None


class LoginRequest(BaseModel):
    """Schema for email/password login."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class AccessTokenResponse(BaseModel):
    """Schema for an issued access credential."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token expiration in seconds")


class IdentityResponse(CamelModel):
    """The authenticated caller with their resolved grants."""

    user_id: UUID
    username: str
    email: str
    role: Role
    permissions: list[str]
