"""Permissions module: administration of per-user capability grants."""

from realty_access.modules.permissions.routes import router


__all__ = ["router"]

# Module metadata
__module_info__ = {
    "name": "permissions",
    "version": "1.0.0",
    "description": "Per-user capability grant administration",
    "dependencies": ["users"],
}
