"""Application exceptions.

Each exception carries the HTTP status and the machine-readable ``code``
the client sees. The handlers in ``handlers.py`` turn them into
``{"success": false, "message": ..., "code": ...}`` bodies, with any
``details`` merged in at the top level.

The generic classes (``NotFoundError``, ``ForbiddenError`` ...) take an
explicit code; the named subclasses below them fix the code for the
failures clients branch on.
"""

from collections.abc import Sequence
from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    Attributes:
        message: Human-readable explanation
        error_code: Machine-readable code for clients
        status_code: HTTP status code for the response
        details: Extra fields merged into the error body
    """

    message: str = "An unexpected error occurred"
    error_code: str = "INTERNAL_ERROR"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


# ============================================================
# Generic errors
# ============================================================


class BadRequestError(AppException):
    message = "Bad request"
    error_code = "BAD_REQUEST"
    status_code = 400


class ValidationError(BadRequestError):
    """Request data is well-formed but not acceptable."""

    message = "Validation error"
    error_code = "VALIDATION_ERROR"


class UnauthorizedError(AppException):
    """The caller could not be authenticated."""

    message = "Authentication required"
    error_code = "UNAUTHORIZED"
    status_code = 401


class ForbiddenError(AppException):
    """The caller is authenticated but may not do this."""

    message = "Access forbidden"
    error_code = "FORBIDDEN"
    status_code = 403


class NotFoundError(AppException):
    message = "Resource not found"
    error_code = "NOT_FOUND"
    status_code = 404

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if resource:
            details["resource"] = resource
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message=message, details=details, **kwargs)


class ConflictError(AppException):
    message = "Resource conflict"
    error_code = "CONFLICT"
    status_code = 409


# ============================================================
# Credential errors (401)
# ============================================================


class NoTokenError(UnauthorizedError):
    message = "Access denied. No token provided."
    error_code = "NO_TOKEN"


class TokenBlacklistedError(UnauthorizedError):
    message = "Token has been invalidated"
    error_code = "TOKEN_BLACKLISTED"


class TokenExpiredError(UnauthorizedError):
    message = "Token expired"
    error_code = "TOKEN_EXPIRED"


class TokenInvalidError(UnauthorizedError):
    message = "Invalid token"
    error_code = "TOKEN_INVALID"


class UserNotFoundError(UnauthorizedError):
    """The credential names an account that no longer exists."""

    message = "User not found"
    error_code = "USER_NOT_FOUND"


class InvalidCredentialsError(UnauthorizedError):
    message = "Invalid email or password"
    error_code = "INVALID_CREDENTIALS"


# ============================================================
# Authorization errors (403)
# ============================================================


class UserBannedError(ForbiddenError):
    message = "Account has been banned"
    error_code = "USER_BANNED"


class AdminRequiredError(ForbiddenError):
    message = "Access denied. Admin privileges required."
    error_code = "ADMIN_REQUIRED"


class PermissionDeniedError(ForbiddenError):
    """The caller's grants do not satisfy the route's requirement."""

    message = "You don't have permission for this action."
    error_code = "PERMISSION_DENIED"

    def __init__(
        self,
        message: str | None = None,
        required: Sequence[str] = (),
        mode: str | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if required:
            details["required_permissions"] = list(required)
        if mode:
            details["mode"] = mode
        super().__init__(message=message, details=details)


# ============================================================
# Administration errors (400)
# ============================================================


class NotEmployeeError(BadRequestError):
    message = "Permissions can only be updated for employees"
    error_code = "NOT_EMPLOYEE"


class InvalidPermissionsError(ValidationError):
    """Some supplied tokens may not be granted; nothing was written."""

    def __init__(self, invalid: Sequence[str]) -> None:
        super().__init__(
            message=f"Invalid permissions: {', '.join(invalid)}",
            details={"invalid_permissions": list(invalid)},
        )
