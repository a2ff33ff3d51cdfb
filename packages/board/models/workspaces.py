"""Workspace model: the top-level container for projects and members."""

from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .associations import workspace_members
from .base import Base, new_id

if TYPE_CHECKING:  # pragma: no cover
    from .projects import Project
    from .users import User

__all__ = ["Workspace"]


class Workspace(Base):
    __tablename__ = "workspaces"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    short_name: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    created_by_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    created_by: Mapped["User"] = relationship(foreign_keys=[created_by_id])
    members: Mapped[list["User"]] = relationship(
        secondary=workspace_members, back_populates="workspaces", order_by="User.name"
    )
    projects: Mapped[list["Project"]] = relationship(
        back_populates="workspace", cascade="all, delete-orphan"
    )
