"""Project, workflow, and label models."""

from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
    select,
)
from sqlalchemy.orm import Mapped, column_property, mapped_column, relationship

from .associations import issue_labels, project_members
from .base import Base, ProjectType, new_id, project_type_enum

if TYPE_CHECKING:  # pragma: no cover
    from .issues import Issue
    from .users import User
    from .workspaces import Workspace

__all__ = ["Project", "Workflow", "Label"]


class Project(Base):
    """Board project owned by a single lead."""

    __tablename__ = "projects"
    __table_args__ = (
        Index("projects_workspace_idx", "workspace_id"),
        Index("projects_lead_idx", "project_lead_id"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    project_type: Mapped[ProjectType] = mapped_column(project_type_enum(), nullable=False)
    project_lead_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )
    default_assignee_id: Mapped[str | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL")
    )
    workspace_id: Mapped[str] = mapped_column(
        ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    project_lead: Mapped["User"] = relationship(foreign_keys=[project_lead_id])
    default_assignee: Mapped["User | None"] = relationship(foreign_keys=[default_assignee_id])
    workspace: Mapped["Workspace"] = relationship(back_populates="projects")
    members: Mapped[list["User"]] = relationship(
        secondary=project_members, back_populates="projects", order_by="User.name"
    )
    workflows: Mapped[list["Workflow"]] = relationship(
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="Workflow.index",
    )
    labels: Mapped[list["Label"]] = relationship(
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="Label.title",
    )


class Workflow(Base):
    """Ordered board column inside a project."""

    __tablename__ = "workflows"
    __table_args__ = (
        UniqueConstraint("project_id", "index", name="workflows_project_index_key"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    index: Mapped[int] = mapped_column(Integer, nullable=False)
    project_id: Mapped[str] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )

    project: Mapped[Project] = relationship(back_populates="workflows")
    issues: Mapped[list["Issue"]] = relationship(
        back_populates="workflow",
        cascade="all, delete-orphan",
        order_by="Issue.index",
    )


class Label(Base):
    """Coloured tag attachable to issues of one project."""

    __tablename__ = "labels"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    color: Mapped[str] = mapped_column(String(7), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    project_id: Mapped[str] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )

    issue_count: Mapped[int] = column_property(
        select(func.count(issue_labels.c.issue_id))
        .where(issue_labels.c.label_id == id)
        .correlate_except(issue_labels)
        .scalar_subquery()
    )

    project: Mapped[Project] = relationship(back_populates="labels")
    issues: Mapped[list["Issue"]] = relationship(
        secondary=issue_labels, back_populates="labels"
    )
