"""Pydantic schemas for board API requests/responses."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import ErrorKind
from .schema.enums import MemberAction, ProjectType

__all__ = [
    "UserCreateRequest",
    "UserResponse",
    "UserSummary",
    "WorkspaceCreateRequest",
    "WorkspaceResponse",
    "WorkspaceMemberRow",
    "WorkspaceMembersResponse",
    "ProjectCreateRequest",
    "ProjectUpdateRequest",
    "ProjectMemberAssignRequest",
    "LeadSummary",
    "ProjectResponse",
    "ProjectSummaryResponse",
    "ProjectDetailResponse",
    "WorkflowCreateRequest",
    "WorkflowRenameRequest",
    "WorkflowResponse",
    "IssueLabel",
    "IssueResponse",
    "BoardWorkflowResponse",
    "LabelCreateRequest",
    "LabelUpdateRequest",
    "LabelResponse",
    "ErrorResponse",
]

LABEL_TITLE_MIN_LENGTH = 4
LABEL_COLOR_LENGTH = 7


# ========================================================================
# 사용자 / 워크스페이스
# ========================================================================


class UserCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[str] = Field(None, max_length=320)
    image: Optional[str] = None


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: Optional[str] = None
    image: Optional[str] = None


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    image: Optional[str] = None


class WorkspaceCreateRequest(BaseModel):
    """워크스페이스 생성 요청."""

    name: str = Field(..., min_length=1, max_length=255)
    short_name: str = Field(..., min_length=1, max_length=64, pattern=r"^[A-Za-z0-9_-]+$")


class WorkspaceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    short_name: str
    created_by_id: str
    members: list[UserSummary]


class WorkspaceMemberRow(BaseModel):
    """One row of the workspace member table."""

    id: str
    name: str
    image: Optional[str] = None
    action: MemberAction


class WorkspaceMembersResponse(BaseModel):
    workspace_id: str
    short_name: str
    created_by_id: str
    member_count: int
    members: list[WorkspaceMemberRow]


# ========================================================================
# 프로젝트
# ========================================================================


class ProjectCreateRequest(BaseModel):
    """프로젝트 생성 요청."""

    name: str = Field(..., min_length=1, max_length=255)
    project_type: ProjectType
    workspace_short_name: str = Field(..., min_length=1)


class ProjectUpdateRequest(BaseModel):
    """프로젝트 수정 요청. ``default_assignee_id`` is required but may be null."""

    name: str = Field(..., max_length=255)
    default_assignee_id: Optional[str]
    project_lead_id: str = Field(..., min_length=1)


class ProjectMemberAssignRequest(BaseModel):
    workspace_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)


class LeadSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    image: Optional[str] = None


class ProjectResponse(BaseModel):
    """프로젝트 응답."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    project_type: ProjectType
    project_lead_id: str
    default_assignee_id: Optional[str]
    workspace_id: str
    created_at: dt.datetime
    updated_at: dt.datetime


class ProjectSummaryResponse(ProjectResponse):
    project_lead: LeadSummary


# ========================================================================
# 라벨
# ========================================================================


class LabelCreateRequest(BaseModel):
    """라벨 생성 요청."""

    title: str = Field(..., min_length=LABEL_TITLE_MIN_LENGTH)
    color: str = Field(..., min_length=LABEL_COLOR_LENGTH, max_length=LABEL_COLOR_LENGTH)
    description: Optional[str] = None


class LabelUpdateRequest(BaseModel):
    """라벨 수정 요청. An omitted ``description`` is left unchanged."""

    title: str = Field(..., min_length=LABEL_TITLE_MIN_LENGTH)
    color: str = Field(..., min_length=LABEL_COLOR_LENGTH, max_length=LABEL_COLOR_LENGTH)
    description: Optional[str] = None


class LabelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    color: str
    description: Optional[str]
    project_id: str
    issue_count: int


class ProjectDetailResponse(ProjectResponse):
    members: list[UserResponse]
    project_lead: UserResponse
    default_assignee: Optional[UserResponse]
    labels: list[LabelResponse]


# ========================================================================
# 워크플로우
# ========================================================================


class WorkflowCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)


class WorkflowRenameRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)


class WorkflowResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    index: int
    project_id: str


class IssueLabel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    color: str


class IssueResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    index: int
    workflow_id: str
    labels: list[IssueLabel]
    comment_count: int
    assignee_count: int
    label_count: int
    linked_issue_count: int


class BoardWorkflowResponse(WorkflowResponse):
    """Workflow column with its issues in board order."""

    issues: list[IssueResponse]


class ErrorResponse(BaseModel):
    kind: ErrorKind
    message: str
