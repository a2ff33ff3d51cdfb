"""Service layer for board management.

비즈니스 로직:
- 프로젝트 수명주기 (생성/수정/삭제, 리드 권한 검사)
- 워크플로우/라벨 관리
- 워크스페이스 멤버십
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

import structlog
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import NoResultFound
from sqlalchemy.orm import Session, sessionmaker

from . import schemas
from .audit import AuditEvent, AuditLogger
from .errors import BadRequestError, UnauthorizedError
from .models import Base, Label, Project, User, Workflow, Workspace
from .repositories import (
    LabelRepository,
    ProjectRepository,
    SqlLabelRepository,
    SqlProjectRepository,
    SqlUserRepository,
    SqlWorkflowRepository,
    SqlWorkspaceRepository,
    UserRepository,
    WorkflowRepository,
    WorkspaceRepository,
)
from .schema.enums import MemberAction
from .schema.templates import seed_workflows, template_for

__all__ = [
    "BoardSettings",
    "BoardDatabase",
    "ProjectService",
    "WorkspaceService",
    "init_engine",
]

logger = structlog.get_logger(__name__)

AUDIT_REDACTED_FIELDS = ("email",)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(slots=True)
class BoardSettings:
    """Board 서비스 설정."""

    database_url: str
    enable_audit: bool = True
    enforce_lead_on_update: bool = False
    cors_origins: tuple[str, ...] = ("http://localhost:3000",)

    @classmethod
    def from_env(cls) -> BoardSettings:
        database_url = (
            os.getenv("BOARD_DB_URL")
            or os.getenv("DATABASE_URL")
            or "sqlite+pysqlite:///./board.db"
        )
        origins = os.getenv("BOARD_CORS_ORIGINS", "http://localhost:3000")
        return cls(
            database_url=database_url,
            enable_audit=_env_flag("BOARD_ENABLE_AUDIT", "true"),
            enforce_lead_on_update=_env_flag("BOARD_ENFORCE_LEAD_ON_UPDATE", "false"),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        )


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:  # noqa: ARG001
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def init_engine(settings: BoardSettings) -> Engine:
    """SQLAlchemy 엔진 초기화."""

    database_url = settings.database_url
    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql+psycopg://", 1)
    elif database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+psycopg://", 1)

    if not database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            echo=False,
            pool_pre_ping=True,
            pool_size=10,
            max_overflow=20,
        )

    from sqlalchemy.pool import StaticPool

    engine = create_engine(
        database_url,
        pool_pre_ping=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


class BoardDatabase:
    """데이터베이스 세션 관리."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)

    def session(self) -> Session:
        return self._session_factory()

    def create_all(self) -> None:
        """테이블 생성 (개발용)."""
        Base.metadata.create_all(self.engine)


class _TransactionalService:
    def __init__(self, session: Session, settings: BoardSettings):
        self.session = session
        self.settings = settings
        self.audit = AuditLogger(
            enabled=settings.enable_audit, redact_fields=AUDIT_REDACTED_FIELDS
        )

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        try:
            yield
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def _log_audit(
        self,
        actor_id: str,
        action: str,
        resource_type: str,
        resource_id: str,
        project_id: Optional[str] = None,
        **metadata,
    ) -> None:
        self.audit.log(
            AuditEvent(
                action=action,
                actor=actor_id,
                resource_type=resource_type,
                resource_id=resource_id,
                project_id=project_id,
                metadata=metadata,
            )
        )

    def _require_user(self, users: UserRepository, user_id: str) -> User:
        user = users.get(user_id)
        if user is None:
            raise NoResultFound(f"User {user_id} not found")
        return user


class ProjectService(_TransactionalService):
    """Project, workflow, and label procedures.

    Every method receives the authenticated caller's id explicitly. Store
    errors (``NoResultFound``, ``IntegrityError``) propagate unchanged except
    from :meth:`delete_project`, which reports only ``UnauthorizedError`` or
    ``BadRequestError``.
    """

    def __init__(
        self,
        session: Session,
        settings: BoardSettings,
        *,
        projects: ProjectRepository | None = None,
        workflows: WorkflowRepository | None = None,
        labels: LabelRepository | None = None,
        workspaces: WorkspaceRepository | None = None,
        users: UserRepository | None = None,
    ):
        super().__init__(session, settings)
        self.projects = projects or SqlProjectRepository(session)
        self.workflows = workflows or SqlWorkflowRepository(session)
        self.labels = labels or SqlLabelRepository(session)
        self.workspaces = workspaces or SqlWorkspaceRepository(session)
        self.users = users or SqlUserRepository(session)

    # ========================================================================
    # 프로젝트
    # ========================================================================

    def list_all_projects(self, user_id: str) -> list[Project]:
        """전체 프로젝트 목록 (리드 이름 포함)."""
        return self.projects.list_all()

    def get_project(self, project_id: str, user_id: str) -> Optional[Project]:
        """프로젝트 상세 조회. Returns ``None`` when the project does not exist."""
        return self.projects.get(project_id, detail=True)

    def list_user_projects(self, user_id: str) -> list[Project]:
        """사용자가 멤버이거나 리드인 프로젝트 목록."""
        return self.projects.list_for_user(user_id)

    def create_project(self, request: schemas.ProjectCreateRequest, user_id: str) -> Project:
        """프로젝트 생성.

        The caller becomes lead and first member, and the workflows of the
        project type's template are created in the same transaction.
        """
        template = template_for(request.project_type)
        with self._transaction():
            workspace = self.workspaces.get_by_short_name(request.workspace_short_name)
            if workspace is None:
                raise NoResultFound(f"Workspace {request.workspace_short_name!r} not found")
            lead = self._require_user(self.users, user_id)
            project = self.projects.create(
                name=request.name,
                project_type=template.project_type,
                lead=lead,
                workspace=workspace,
                workflows=seed_workflows(template.default_workflows),
            )

        logger.info(
            "project_created",
            project_id=project.id,
            project_type=template.project_type.value,
            workspace=workspace.short_name,
            lead_id=user_id,
        )
        self._log_audit(user_id, "project.created", "project", project.id, project.id)
        return project

    def update_project(
        self, project_id: str, request: schemas.ProjectUpdateRequest, user_id: str
    ) -> Project:
        """프로젝트 수정 (이름, 기본 담당자, 리드)."""
        with self._transaction():
            project = self.projects.get(project_id)
            if project is None:
                raise NoResultFound(f"Project {project_id} not found")
            if self.settings.enforce_lead_on_update and project.project_lead_id != user_id:
                raise UnauthorizedError("Only the project lead can update the project")

            self._require_user(self.users, request.project_lead_id)
            if request.default_assignee_id is not None:
                self._require_user(self.users, request.default_assignee_id)

            project.name = request.name
            project.default_assignee_id = request.default_assignee_id
            project.project_lead_id = request.project_lead_id
            self.session.flush()

        self._log_audit(
            user_id,
            "project.updated",
            "project",
            project.id,
            project.id,
            project_lead_id=project.project_lead_id,
        )
        return project

    def delete_project(self, project_id: str, user_id: str) -> Project:
        """프로젝트 삭제 (리드 전용).

        Failures other than the lead check are reported as ``BadRequestError``
        without the original cause.
        """
        try:
            project = self.projects.get(project_id)
            if project is None:
                raise NoResultFound(f"Project {project_id} not found")
            if project.project_lead_id != user_id:
                raise UnauthorizedError("You don't have access to delete the project")
            self.projects.delete(project)
            self.session.commit()
        except UnauthorizedError:
            self.session.rollback()
            logger.info("project_delete_rejected", project_id=project_id, user_id=user_id)
            raise
        except Exception:
            self.session.rollback()
            logger.warning(
                "project_delete_failed", project_id=project_id, user_id=user_id, exc_info=True
            )
            raise BadRequestError("An unexpected error occurred") from None

        logger.info("project_deleted", project_id=project_id, user_id=user_id)
        self._log_audit(user_id, "project.deleted", "project", project_id, project_id)
        return project

    # ========================================================================
    # 멤버십
    # ========================================================================

    def assign_user_to_project(
        self,
        project_id: str,
        request: schemas.ProjectMemberAssignRequest,
        user_id: str,
    ) -> Project:
        """워크스페이스 내 프로젝트에 사용자 추가."""
        with self._transaction():
            project = self.projects.get_in_workspace(project_id, request.workspace_id)
            if project is None:
                raise NoResultFound(
                    f"Project {project_id} not found in workspace {request.workspace_id}"
                )
            member = self._require_user(self.users, request.user_id)
            self.projects.add_member(project, member)

        self._log_audit(
            user_id, "member.added", "member", request.user_id, project.id
        )
        return project

    def get_project_members(self, project_id: str, user_id: str) -> Optional[list[User]]:
        """멤버 목록. Returns ``None`` when the project does not exist."""
        project = self.projects.get(project_id)
        if project is None:
            return None
        return list(project.members)

    # ========================================================================
    # 워크플로우
    # ========================================================================

    def get_project_workflows(self, project_id: str, user_id: str) -> list[Workflow]:
        """보드 조회: 워크플로우와 이슈를 index 순으로 반환."""
        return self.workflows.list_board(project_id)

    def create_workflow(
        self, project_id: str, request: schemas.WorkflowCreateRequest, user_id: str
    ) -> Workflow:
        """워크플로우를 마지막 위치에 추가."""
        with self._transaction():
            project = self.projects.get(project_id)
            if project is None:
                raise NoResultFound(f"Project {project_id} not found")
            workflow = self.workflows.append(project, request.title)

        self._log_audit(
            user_id, "workflow.created", "workflow", workflow.id, project_id, index=workflow.index
        )
        return workflow

    def rename_workflow(
        self, workflow_id: str, request: schemas.WorkflowRenameRequest, user_id: str
    ) -> Workflow:
        with self._transaction():
            workflow = self.workflows.get(workflow_id)
            if workflow is None:
                raise NoResultFound(f"Workflow {workflow_id} not found")
            workflow.title = request.title
            self.session.flush()

        self._log_audit(
            user_id, "workflow.renamed", "workflow", workflow.id, workflow.project_id
        )
        return workflow

    def delete_workflow(self, workflow_id: str, user_id: str) -> Workflow:
        """워크플로우 삭제. Later workflows move up one position."""
        with self._transaction():
            workflow = self.workflows.get(workflow_id)
            if workflow is None:
                raise NoResultFound(f"Workflow {workflow_id} not found")
            self.workflows.delete(workflow)

        self._log_audit(
            user_id, "workflow.deleted", "workflow", workflow_id, workflow.project_id
        )
        return workflow

    # ========================================================================
    # 라벨
    # ========================================================================

    def create_label(
        self, project_id: str, request: schemas.LabelCreateRequest, user_id: str
    ) -> Label:
        """라벨 생성."""
        with self._transaction():
            label = self.labels.create(
                project_id=project_id,
                title=request.title,
                color=request.color,
                description=request.description,
            )

        logger.info("label_created", label_id=label.id, project_id=project_id)
        self._log_audit(user_id, "label.created", "label", label.id, project_id)
        return label

    def list_labels(self, project_id: str, user_id: str) -> list[Label]:
        return self.labels.list_for_project(project_id)

    def update_label(
        self, label_id: str, request: schemas.LabelUpdateRequest, user_id: str
    ) -> Label:
        """라벨 수정."""
        with self._transaction():
            label = self.labels.get(label_id)
            if label is None:
                raise NoResultFound(f"Label {label_id} not found")
            label.title = request.title
            label.color = request.color
            if "description" in request.model_fields_set:
                label.description = request.description
            self.labels.save(label)

        self._log_audit(user_id, "label.updated", "label", label.id, label.project_id)
        return label

    def delete_label(self, label_id: str, user_id: str) -> Label:
        """라벨 삭제."""
        with self._transaction():
            label = self.labels.get(label_id)
            if label is None:
                raise NoResultFound(f"Label {label_id} not found")
            self.labels.delete(label)

        logger.info("label_deleted", label_id=label_id, project_id=label.project_id)
        self._log_audit(user_id, "label.deleted", "label", label_id, label.project_id)
        return label


class WorkspaceService(_TransactionalService):
    """User and workspace procedures."""

    def __init__(
        self,
        session: Session,
        settings: BoardSettings,
        *,
        workspaces: WorkspaceRepository | None = None,
        users: UserRepository | None = None,
    ):
        super().__init__(session, settings)
        self.workspaces = workspaces or SqlWorkspaceRepository(session)
        self.users = users or SqlUserRepository(session)

    def create_user(self, request: schemas.UserCreateRequest) -> User:
        with self._transaction():
            user = self.users.create(
                name=request.name, email=request.email, image=request.image
            )
        logger.info("user_created", user_id=user.id)
        self._log_audit(user.id, "user.created", "user", user.id, email=user.email)
        return user

    def get_user(self, user_id: str) -> User:
        return self._require_user(self.users, user_id)

    def create_workspace(
        self, request: schemas.WorkspaceCreateRequest, user_id: str
    ) -> Workspace:
        """워크스페이스 생성. The creator is recorded and joins as a member."""
        with self._transaction():
            creator = self._require_user(self.users, user_id)
            workspace = self.workspaces.create(
                name=request.name, short_name=request.short_name, creator=creator
            )

        logger.info("workspace_created", workspace_id=workspace.id, short_name=workspace.short_name)
        self._log_audit(user_id, "workspace.created", "workspace", workspace.id)
        return workspace

    def get_workspace(self, short_name: str, user_id: str) -> Workspace:
        workspace = self.workspaces.get_by_short_name(short_name)
        if workspace is None:
            raise NoResultFound(f"Workspace {short_name!r} not found")
        return workspace

    def list_workspace_members(
        self, short_name: str, user_id: str
    ) -> schemas.WorkspaceMembersResponse:
        """멤버 테이블 행. The creator may only leave; others may be removed."""
        workspace = self.get_workspace(short_name, user_id)
        rows = [
            schemas.WorkspaceMemberRow(
                id=member.id,
                name=member.name,
                image=member.image,
                action=(
                    MemberAction.LEAVE
                    if member.id == workspace.created_by_id
                    else MemberAction.REMOVE
                ),
            )
            for member in workspace.members
        ]
        return schemas.WorkspaceMembersResponse(
            workspace_id=workspace.id,
            short_name=workspace.short_name,
            created_by_id=workspace.created_by_id,
            member_count=len(rows),
            members=rows,
        )

    def join_workspace(self, short_name: str, user_id: str) -> Workspace:
        with self._transaction():
            workspace = self.get_workspace(short_name, user_id)
            user = self._require_user(self.users, user_id)
            self.workspaces.add_member(workspace, user)

        self._log_audit(user_id, "workspace.joined", "workspace", workspace.id)
        return workspace
