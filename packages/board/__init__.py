"""Kanban/Scrum board models, procedures and HTTP API."""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    # Models
    "Base",
    "Issue",
    "Label",
    "Project",
    "ProjectType",
    "User",
    "Workflow",
    "Workspace",
    # Errors
    "BadRequestError",
    "BoardError",
    "ErrorKind",
    "UnauthorizedError",
    # API
    "create_app",
    # Service
    "BoardSettings",
    "BoardDatabase",
    "ProjectService",
    "WorkspaceService",
    "init_engine",
]

_MODULE_BY_NAME = {
    "Base": ".models",
    "Issue": ".models",
    "Label": ".models",
    "Project": ".models",
    "ProjectType": ".models",
    "User": ".models",
    "Workflow": ".models",
    "Workspace": ".models",
    "BadRequestError": ".errors",
    "BoardError": ".errors",
    "ErrorKind": ".errors",
    "UnauthorizedError": ".errors",
    "create_app": ".api",
    "BoardSettings": ".service",
    "BoardDatabase": ".service",
    "ProjectService": ".service",
    "WorkspaceService": ".service",
    "init_engine": ".service",
}


def __getattr__(name: str) -> Any:  # pragma: no cover - thin import shim
    module_name = _MODULE_BY_NAME.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    value = getattr(import_module(module_name, __name__), name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:  # pragma: no cover - introspection helper
    return sorted(__all__ + ["schema"])
