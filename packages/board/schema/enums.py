"""Canonical board enum definitions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping

from sqlalchemy import Enum as SqlEnum

__all__ = [
    "BoardEnum",
    "EnumDefinition",
    "ProjectType",
    "MemberAction",
    "ENUM_DEFINITIONS",
    "sa_enum",
]


class BoardEnum(str, Enum):
    """Base class for board enums persisted by value."""

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(item.value for item in cls)


class ProjectType(BoardEnum):
    KANBAN = "KANBAN"
    SCRUM = "SCRUM"


class MemberAction(BoardEnum):
    """Action offered next to a workspace member in the member list."""

    LEAVE = "leave"
    REMOVE = "remove"


@dataclass(frozen=True)
class EnumDefinition:
    """Metadata describing a database enum type."""

    name: str
    values: tuple[str, ...]
    enum_cls: type[BoardEnum]


ENUM_DEFINITIONS: tuple[EnumDefinition, ...] = (
    EnumDefinition("project_type", ProjectType.values(), ProjectType),
)

ENUM_DEFINITION_BY_CLASS: Mapping[type[BoardEnum], EnumDefinition] = {
    definition.enum_cls: definition for definition in ENUM_DEFINITIONS
}


def sa_enum(enum_cls: type[BoardEnum]) -> SqlEnum:
    """Return a SQLAlchemy ``Enum`` tied to the canonical definition."""

    definition = ENUM_DEFINITION_BY_CLASS[enum_cls]
    return SqlEnum(
        enum_cls,
        name=definition.name,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
    )
