"""Board schema helpers shared between ORM models and services."""

from .enums import (
    BoardEnum,
    EnumDefinition,
    MemberAction,
    ProjectType,
    ENUM_DEFINITIONS,
    sa_enum,
)
from .templates import PROJECT_TEMPLATES, ProjectTemplate, seed_workflows, template_for

__all__ = [
    "BoardEnum",
    "EnumDefinition",
    "MemberAction",
    "ProjectType",
    "ENUM_DEFINITIONS",
    "sa_enum",
    "PROJECT_TEMPLATES",
    "ProjectTemplate",
    "seed_workflows",
    "template_for",
]
