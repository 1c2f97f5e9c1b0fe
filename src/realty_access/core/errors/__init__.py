"""Error handling module with the shared response envelope."""

from realty_access.core.errors.exceptions import (
    AdminRequiredError,
    AppException,
    BadRequestError,
    ConflictError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidPermissionsError,
    NoTokenError,
    NotEmployeeError,
    NotFoundError,
    PermissionDeniedError,
    TokenBlacklistedError,
    TokenExpiredError,
    TokenInvalidError,
    UnauthorizedError,
    UserBannedError,
    UserNotFoundError,
    ValidationError,
)
from realty_access.core.errors.handlers import (
    ErrorResponse,
    FieldError,
    register_exception_handlers,
)


__all__ = [
    "AdminRequiredError",
    # Exceptions
    "AppException",
    "BadRequestError",
    "ConflictError",
    # Handlers
    "ErrorResponse",
    "FieldError",
    "ForbiddenError",
    "InvalidCredentialsError",
    "InvalidPermissionsError",
    "NoTokenError",
    "NotEmployeeError",
    "NotFoundError",
    "PermissionDeniedError",
    "TokenBlacklistedError",
    "TokenExpiredError",
    "TokenInvalidError",
    "UnauthorizedError",
    "UserBannedError",
    "UserNotFoundError",
    "ValidationError",
    "register_exception_handlers",
]
