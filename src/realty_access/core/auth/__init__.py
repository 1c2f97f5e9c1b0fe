"""Authentication module: credentials, the request gate, and auth routes."""

from realty_access.core.auth.backend import (
    create_access_token,
    hash_password,
    hash_token,
    verify_access_token,
    verify_password,
)
from realty_access.core.auth.dependencies import (
    CurrentIdentity,
    GateOptions,
    RequestGate,
    make_gate,
)
from realty_access.core.auth.middleware import RequestIdMiddleware
from realty_access.core.auth.routes import router as auth_router
from realty_access.core.auth.schemas import TokenData
from realty_access.core.auth.service import AuthService


__all__ = [
    # Dependencies and service
    "AuthService",
    "CurrentIdentity",
    "GateOptions",
    "RequestGate",
    # Middleware
    "RequestIdMiddleware",
    # Schemas
    "TokenData",
    # Routers
    "auth_router",
    # Token utilities
    "create_access_token",
    # Password utilities
    "hash_password",
    "hash_token",
    "make_gate",
    "verify_access_token",
    "verify_password",
]
