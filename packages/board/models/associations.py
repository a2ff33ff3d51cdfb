"""Many-to-many association tables."""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, String, Table

from .base import Base

__all__ = [
    "workspace_members",
    "project_members",
    "issue_labels",
    "issue_assignees",
    "issue_links",
]


def _fk(target: str) -> ForeignKey:
    return ForeignKey(target, ondelete="CASCADE")


workspace_members = Table(
    "workspace_members",
    Base.metadata,
    Column("workspace_id", String(32), _fk("workspaces.id"), primary_key=True),
    Column("user_id", String(32), _fk("users.id"), primary_key=True),
)

project_members = Table(
    "project_members",
    Base.metadata,
    Column("project_id", String(32), _fk("projects.id"), primary_key=True),
    Column("user_id", String(32), _fk("users.id"), primary_key=True),
)

issue_labels = Table(
    "issue_labels",
    Base.metadata,
    Column("issue_id", String(32), _fk("issues.id"), primary_key=True),
    Column("label_id", String(32), _fk("labels.id"), primary_key=True),
)

issue_assignees = Table(
    "issue_assignees",
    Base.metadata,
    Column("issue_id", String(32), _fk("issues.id"), primary_key=True),
    Column("user_id", String(32), _fk("users.id"), primary_key=True),
)

issue_links = Table(
    "issue_links",
    Base.metadata,
    Column("issue_id", String(32), _fk("issues.id"), primary_key=True),
    Column("linked_issue_id", String(32), _fk("issues.id"), primary_key=True),
)
