"""Default workflow templates applied when a project is created."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from .enums import ProjectType

__all__ = ["ProjectTemplate", "PROJECT_TEMPLATES", "template_for", "seed_workflows"]


@dataclass(frozen=True)
class ProjectTemplate:
    """Fixed board layout for a project type."""

    project_type: ProjectType
    project_name: str
    default_workflows: tuple[str, ...]


PROJECT_TEMPLATES: Mapping[ProjectType, ProjectTemplate] = {
    ProjectType.KANBAN: ProjectTemplate(
        project_type=ProjectType.KANBAN,
        project_name="Kanban",
        default_workflows=("Backlog", "To Do", "In Progress", "Done"),
    ),
    ProjectType.SCRUM: ProjectTemplate(
        project_type=ProjectType.SCRUM,
        project_name="Scrum",
        default_workflows=("Backlog", "To Do", "In Progress", "Review", "Done"),
    ),
}


def template_for(project_type: ProjectType | str) -> ProjectTemplate:
    return PROJECT_TEMPLATES[ProjectType(project_type)]


def seed_workflows(titles: Iterable[str]) -> list[tuple[int, str]]:
    """Return ``(index, title)`` pairs, skipping repeated titles.

    The index is always the title's position in *titles*. A skipped duplicate
    therefore leaves its slot unused, so only duplicate-free title lists give
    dense indices; every entry in ``PROJECT_TEMPLATES`` is duplicate-free.
    """

    seen: set[str] = set()
    rows: list[tuple[int, str]] = []
    for index, title in enumerate(titles):
        if title in seen:
            continue
        seen.add(title)
        rows.append((index, title))
    return rows
