"""Authentication backend for JWT and password handling.

This module provides core authentication utilities including:
- Password hashing with bcrypt
- Access credential creation and verification
- Token hashing for the revocation list
"""

import hashlib
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from realty_access.config import settings
from realty_access.core.auth.schemas import TokenData
from realty_access.core.constants import ACCESS_TOKEN_JTI_LENGTH, BCRYPT_ROUNDS
from realty_access.core.errors import TokenExpiredError, TokenInvalidError
from realty_access.modules.users.enums import Role


pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=BCRYPT_ROUNDS,
)


# ============================================================
# Password Utilities
# ============================================================


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Bcrypt hash of the password
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Bcrypt hash to verify against

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


# ============================================================
# JWT Token Utilities
# ============================================================


def create_access_token(
    user_id: UUID,
    username: str,
    email: str,
    role: Role,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a short-lived signed access credential.

    Args:
        user_id: The user's UUID
        username: Display name carried in the claim
        email: Email carried in the claim
        role: Role carried in the claim
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT access token
    """
    now = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    to_encode: dict[str, Any] = {
        "sub": str(user_id),
        "username": username,
        "email": email,
        "role": role.value,
        "exp": now + expires_delta,
        "iat": now,
        "type": "access",
        "jti": secrets.token_urlsafe(ACCESS_TOKEN_JTI_LENGTH),  # Unique token ID
    }

    return jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )


def hash_token(token: str) -> str:
    """Hash a credential for the revocation list.

    Args:
        token: The raw credential

    Returns:
        SHA-256 hex digest of the credential
    """
    return hashlib.sha256(token.encode()).hexdigest()


def verify_access_token(token: str) -> TokenData:
    """Verify a credential's signature and expiry and decode its claim.

    Args:
        token: The raw credential

    Returns:
        The decoded identity claim

    Raises:
        TokenExpiredError: When past expiry
        TokenInvalidError: For any other signature, format or claim problem
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except ExpiredSignatureError as e:
        raise TokenExpiredError() from e
    except JWTError as e:
        raise TokenInvalidError() from e

    if payload.get("type", "access") != "access":
        raise TokenInvalidError("Invalid token type")

    try:
        return TokenData(
            user_id=UUID(payload["sub"]),
            username=payload["username"],
            email=payload["email"],
            role=Role(payload["role"]),
            exp=datetime.fromtimestamp(payload["exp"], tz=UTC),
            type=payload.get("type", "access"),
            jti=payload.get("jti"),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise TokenInvalidError() from e
