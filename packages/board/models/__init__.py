"""Board SQLAlchemy models organized by domain."""

from .base import Base, ProjectType, new_id, project_type_enum
from .associations import (
    issue_assignees,
    issue_labels,
    issue_links,
    project_members,
    workspace_members,
)
from .users import User
from .workspaces import Workspace
from .projects import Label, Project, Workflow
from .issues import Comment, Issue

__all__ = [
    "Base",
    "ProjectType",
    "new_id",
    "project_type_enum",
    "User",
    "Workspace",
    "Project",
    "Workflow",
    "Label",
    "Issue",
    "Comment",
    "workspace_members",
    "project_members",
    "issue_labels",
    "issue_assignees",
    "issue_links",
]
