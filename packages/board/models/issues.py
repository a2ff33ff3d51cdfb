"""Issue and comment models.

Issues are only read by the project procedures; they are listed here so
workflow boards can report label and count aggregates.
"""

from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, func, select
from sqlalchemy.orm import Mapped, column_property, mapped_column, relationship

from .associations import issue_assignees, issue_labels, issue_links
from .base import Base, new_id

if TYPE_CHECKING:  # pragma: no cover
    from .projects import Label, Workflow
    from .users import User

__all__ = ["Comment", "Issue"]


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    issue_id: Mapped[str] = mapped_column(
        ForeignKey("issues.id", ondelete="CASCADE"), nullable=False
    )
    author_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    issue: Mapped["Issue"] = relationship(back_populates="comments")
    author: Mapped["User"] = relationship()


def _count_where(column, key):
    return (
        select(func.count())
        .select_from(column.table)
        .where(column == key)
        .correlate_except(column.table)
        .scalar_subquery()
    )


class Issue(Base):
    __tablename__ = "issues"
    __table_args__ = (Index("issues_workflow_index_idx", "workflow_id", "index"),)

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    index: Mapped[int] = mapped_column(Integer, nullable=False)
    workflow_id: Mapped[str] = mapped_column(
        ForeignKey("workflows.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    comment_count: Mapped[int] = column_property(_count_where(Comment.__table__.c.issue_id, id))
    assignee_count: Mapped[int] = column_property(_count_where(issue_assignees.c.issue_id, id))
    label_count: Mapped[int] = column_property(_count_where(issue_labels.c.issue_id, id))
    linked_issue_count: Mapped[int] = column_property(_count_where(issue_links.c.issue_id, id))

    workflow: Mapped["Workflow"] = relationship(back_populates="issues")
    labels: Mapped[list["Label"]] = relationship(
        secondary=issue_labels, back_populates="issues", order_by="Label.title"
    )
    assignees: Mapped[list["User"]] = relationship(secondary=issue_assignees)
    comments: Mapped[list[Comment]] = relationship(
        back_populates="issue", cascade="all, delete-orphan"
    )
    linked_issues: Mapped[list["Issue"]] = relationship(
        secondary=issue_links,
        primaryjoin=lambda: Issue.id == issue_links.c.issue_id,
        secondaryjoin=lambda: Issue.id == issue_links.c.linked_issue_id,
    )
