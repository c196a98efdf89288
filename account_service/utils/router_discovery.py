import importlib
import inspect
import pkgutil

from fastapi import APIRouter, FastAPI
from loguru import logger


def discover_routers(package_name: str = "account_service.api") -> list[APIRouter]:
    """Import every module under ``package_name`` and collect its APIRouter instances.

    Subpackages are scanned recursively. Modules whose name starts with an underscore are
    skipped.
    """
    package = importlib.import_module(package_name)
    package_path = getattr(package, "__path__", None)
    if not package_path:
        logger.warning(f"Cannot scan {package_name} for routers as it's not a package")
        return []

    routers: list[APIRouter] = []
    for _, module_name, is_pkg in pkgutil.iter_modules(package_path):
        if module_name.startswith("_"):
            continue

        full_module_name = f"{package_name}.{module_name}"
        if is_pkg:
            routers.extend(discover_routers(full_module_name))
            continue

        module = importlib.import_module(full_module_name)
        for _, obj in inspect.getmembers(module, lambda member: isinstance(member, APIRouter)):
            routers.append(obj)
            logger.info(f"Discovered router in {full_module_name}")

    return routers


def register_routers(app: FastAPI, prefix: str = "/api") -> None:
    for router in discover_routers():
        app.include_router(router, prefix=prefix)
