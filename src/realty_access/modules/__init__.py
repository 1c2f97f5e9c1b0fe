"""Feature modules mounted under the versioned API.

A module is a subpackage exposing ``router``; it may also declare
``__module_info__`` with a name, version and the modules it depends on.
"""

import pkgutil
from importlib import import_module

import structlog
from fastapi import APIRouter


logger = structlog.get_logger()


def discover_modules() -> list[APIRouter]:
    """Import every feature module and collect its router.

    Modules without a router (such as ``users``, which only provides
    models and repositories) are skipped. Import errors propagate so a
    broken module stops startup instead of silently dropping routes.

    Returns:
        Routers in package-name order.

    Raises:
        RuntimeError: If a module depends on a package that does not exist
    """
    packages = sorted(
        info.name
        for info in pkgutil.iter_modules(__path__)
        if info.ispkg and not info.name.startswith("_")
    )
    routers: list[APIRouter] = []

    for name in packages:
        module = import_module(f"{__name__}.{name}")
        router = getattr(module, "router", None)
        if router is None:
            continue

        meta = getattr(module, "__module_info__", {})
        missing = [dep for dep in meta.get("dependencies", []) if dep not in packages]
        if missing:
            raise RuntimeError(f"Module {name} depends on missing modules: {', '.join(missing)}")

        routers.append(router)
        logger.info(
            "module_loaded",
            module=name,
            version=meta.get("version"),
            prefix=router.prefix,
        )

    return routers
