"""User accounts referenced by workspaces, projects and issues."""

from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .associations import project_members, workspace_members
from .base import Base, new_id

if TYPE_CHECKING:  # pragma: no cover
    from .projects import Project
    from .workspaces import Workspace

__all__ = ["User"]


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str | None] = mapped_column(String(320), unique=True)
    image: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    workspaces: Mapped[list["Workspace"]] = relationship(
        secondary=workspace_members, back_populates="members"
    )
    projects: Mapped[list["Project"]] = relationship(
        secondary=project_members, back_populates="members"
    )
