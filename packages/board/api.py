"""FastAPI application for Kanban/Scrum board management.

- 프로젝트 수명주기 (생성/수정/삭제)
- 워크플로우/라벨 관리
- 워크스페이스 멤버십
"""

from __future__ import annotations

from typing import Generator, Optional

import structlog
from fastapi import Depends, FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, NoResultFound
from sqlalchemy.orm import Session

from . import schemas
from .errors import BoardError, ErrorKind, UnauthorizedError
from .service import (
    BoardDatabase,
    BoardSettings,
    ProjectService,
    WorkspaceService,
    init_engine,
)

__all__ = ["create_app", "BoardSettings"]

logger = structlog.get_logger(__name__)

USER_HEADER = "X-User-ID"


def _error(status_code: int, kind: ErrorKind, message: str, **extra) -> JSONResponse:
    body = schemas.ErrorResponse(kind=kind, message=message).model_dump(mode="json")
    body.update(extra)
    return JSONResponse(status_code=status_code, content=body)


def create_app(settings: BoardSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application for board management."""

    settings = settings or BoardSettings.from_env()
    engine = init_engine(settings)
    database = BoardDatabase(engine=engine)
    database.create_all()

    app = FastAPI(
        title="Board API",
        version="1.0.0",
        description="Kanban/Scrum 프로젝트 관리",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def get_session() -> Generator[Session, None, None]:
        session = database.session()
        try:
            yield session
        finally:
            session.close()

    def get_project_service(session: Session = Depends(get_session)) -> ProjectService:
        return ProjectService(session=session, settings=settings)

    def get_workspace_service(session: Session = Depends(get_session)) -> WorkspaceService:
        return WorkspaceService(session=session, settings=settings)

    def get_current_user(
        request: Request,
        workspaces: WorkspaceService = Depends(get_workspace_service),
    ) -> str:
        """Resolve the caller from the ``X-User-ID`` header."""
        # TODO: replace the header with session/JWT verification
        user_id = request.headers.get(USER_HEADER)
        if not user_id:
            raise UnauthorizedError("Authentication required")
        try:
            workspaces.get_user(user_id)
        except NoResultFound:
            raise UnauthorizedError("Unknown user") from None
        return user_id

    # ========================================================================
    # 에러 처리
    # ========================================================================

    @app.exception_handler(BoardError)
    async def _handle_board_error(request: Request, exc: BoardError):
        return _error(exc.status_code, exc.kind, exc.message)

    @app.exception_handler(NoResultFound)
    async def _handle_not_found(request: Request, exc: NoResultFound):
        return _error(status.HTTP_404_NOT_FOUND, ErrorKind.NOT_FOUND, str(exc) or "Not found")

    @app.exception_handler(IntegrityError)
    async def _handle_conflict(request: Request, exc: IntegrityError):
        logger.info("integrity_error", path=request.url.path, error=str(exc.orig))
        return _error(status.HTTP_409_CONFLICT, ErrorKind.CONFLICT, "Constraint violation")

    @app.exception_handler(RequestValidationError)
    async def _handle_request_validation(request: Request, exc: RequestValidationError):
        return _error(
            422,
            ErrorKind.VALIDATION,
            "Invalid request",
            errors=jsonable_encoder(exc.errors()),
        )

    @app.exception_handler(ValidationError)
    async def _handle_validation(request: Request, exc: ValidationError):
        return _error(
            422,
            ErrorKind.VALIDATION,
            "Invalid request",
            errors=jsonable_encoder(exc.errors()),
        )

    @app.exception_handler(Exception)
    async def _handle_errors(request: Request, exc: Exception):
        logger.error("unhandled_error", path=request.url.path, exc_info=exc)
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorKind.INTERNAL,
            "Internal server error",
        )

    @app.get("/healthz", tags=["health"])
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    # ========================================================================
    # 프로젝트 수명주기
    # ========================================================================

    @app.get("/v1/projects", response_model=list[schemas.ProjectSummaryResponse])
    def list_all_projects(
        service: ProjectService = Depends(get_project_service),
        user_id: str = Depends(get_current_user),
    ) -> list[schemas.ProjectSummaryResponse]:
        """전체 프로젝트 목록."""
        return [
            schemas.ProjectSummaryResponse.model_validate(p, from_attributes=True)
            for p in service.list_all_projects(user_id)
        ]

    @app.get("/v1/projects/mine", response_model=list[schemas.ProjectSummaryResponse])
    def list_user_projects(
        service: ProjectService = Depends(get_project_service),
        user_id: str = Depends(get_current_user),
    ) -> list[schemas.ProjectSummaryResponse]:
        """내 프로젝트 목록 (멤버 또는 리드)."""
        return [
            schemas.ProjectSummaryResponse.model_validate(p, from_attributes=True)
            for p in service.list_user_projects(user_id)
        ]

    @app.post("/v1/projects", response_model=schemas.ProjectResponse, status_code=201)
    def create_project(
        request: schemas.ProjectCreateRequest,
        service: ProjectService = Depends(get_project_service),
        user_id: str = Depends(get_current_user),
    ) -> schemas.ProjectResponse:
        """프로젝트 생성."""
        project = service.create_project(request, user_id)
        return schemas.ProjectResponse.model_validate(project, from_attributes=True)

    @app.get("/v1/projects/{project_id}", response_model=Optional[schemas.ProjectDetailResponse])
    def get_project(
        project_id: str,
        service: ProjectService = Depends(get_project_service),
        user_id: str = Depends(get_current_user),
    ) -> Optional[schemas.ProjectDetailResponse]:
        """프로젝트 조회. Responds with ``null`` for an unknown id."""
        project = service.get_project(project_id, user_id)
        if project is None:
            return None
        return schemas.ProjectDetailResponse.model_validate(project, from_attributes=True)

    @app.patch("/v1/projects/{project_id}", response_model=schemas.ProjectResponse)
    def update_project(
        project_id: str,
        request: schemas.ProjectUpdateRequest,
        service: ProjectService = Depends(get_project_service),
        user_id: str = Depends(get_current_user),
    ) -> schemas.ProjectResponse:
        """프로젝트 수정."""
        project = service.update_project(project_id, request, user_id)
        return schemas.ProjectResponse.model_validate(project, from_attributes=True)

    @app.delete("/v1/projects/{project_id}", response_model=schemas.ProjectResponse)
    def delete_project(
        project_id: str,
        service: ProjectService = Depends(get_project_service),
        user_id: str = Depends(get_current_user),
    ) -> schemas.ProjectResponse:
        """프로젝트 삭제 (리드 전용)."""
        project = service.delete_project(project_id, user_id)
        return schemas.ProjectResponse.model_validate(project, from_attributes=True)

    # ========================================================================
    # 멤버십
    # ========================================================================

    @app.post("/v1/projects/{project_id}/members", response_model=list[schemas.UserResponse])
    def assign_user_to_project(
        project_id: str,
        request: schemas.ProjectMemberAssignRequest,
        service: ProjectService = Depends(get_project_service),
        user_id: str = Depends(get_current_user),
    ) -> list[schemas.UserResponse]:
        """프로젝트 멤버 추가."""
        project = service.assign_user_to_project(project_id, request, user_id)
        return [
            schemas.UserResponse.model_validate(m, from_attributes=True)
            for m in project.members
        ]

    @app.get(
        "/v1/projects/{project_id}/members",
        response_model=Optional[list[schemas.UserResponse]],
    )
    def get_project_members(
        project_id: str,
        service: ProjectService = Depends(get_project_service),
        user_id: str = Depends(get_current_user),
    ) -> Optional[list[schemas.UserResponse]]:
        """멤버 목록."""
        members = service.get_project_members(project_id, user_id)
        if members is None:
            return None
        return [schemas.UserResponse.model_validate(m, from_attributes=True) for m in members]

    # ========================================================================
    # 워크플로우
    # ========================================================================

    @app.get(
        "/v1/projects/{project_id}/workflows",
        response_model=list[schemas.BoardWorkflowResponse],
    )
    def get_project_workflows(
        project_id: str,
        service: ProjectService = Depends(get_project_service),
        user_id: str = Depends(get_current_user),
    ) -> list[schemas.BoardWorkflowResponse]:
        """보드 조회."""
        return [
            schemas.BoardWorkflowResponse.model_validate(w, from_attributes=True)
            for w in service.get_project_workflows(project_id, user_id)
        ]

    @app.post(
        "/v1/projects/{project_id}/workflows",
        response_model=schemas.WorkflowResponse,
        status_code=201,
    )
    def create_workflow(
        project_id: str,
        request: schemas.WorkflowCreateRequest,
        service: ProjectService = Depends(get_project_service),
        user_id: str = Depends(get_current_user),
    ) -> schemas.WorkflowResponse:
        workflow = service.create_workflow(project_id, request, user_id)
        return schemas.WorkflowResponse.model_validate(workflow, from_attributes=True)

    @app.patch("/v1/workflows/{workflow_id}", response_model=schemas.WorkflowResponse)
    def rename_workflow(
        workflow_id: str,
        request: schemas.WorkflowRenameRequest,
        service: ProjectService = Depends(get_project_service),
        user_id: str = Depends(get_current_user),
    ) -> schemas.WorkflowResponse:
        workflow = service.rename_workflow(workflow_id, request, user_id)
        return schemas.WorkflowResponse.model_validate(workflow, from_attributes=True)

    @app.delete("/v1/workflows/{workflow_id}", response_model=schemas.WorkflowResponse)
    def delete_workflow(
        workflow_id: str,
        service: ProjectService = Depends(get_project_service),
        user_id: str = Depends(get_current_user),
    ) -> schemas.WorkflowResponse:
        workflow = service.delete_workflow(workflow_id, user_id)
        return schemas.WorkflowResponse.model_validate(workflow, from_attributes=True)

    # ========================================================================
    # 라벨
    # ========================================================================

    @app.get("/v1/projects/{project_id}/labels", response_model=list[schemas.LabelResponse])
    def list_project_labels(
        project_id: str,
        service: ProjectService = Depends(get_project_service),
        user_id: str = Depends(get_current_user),
    ) -> list[schemas.LabelResponse]:
        return [
            schemas.LabelResponse.model_validate(label, from_attributes=True)
            for label in service.list_labels(project_id, user_id)
        ]

    @app.post(
        "/v1/projects/{project_id}/labels",
        response_model=schemas.LabelResponse,
        status_code=201,
    )
    def create_project_label(
        project_id: str,
        request: schemas.LabelCreateRequest,
        service: ProjectService = Depends(get_project_service),
        user_id: str = Depends(get_current_user),
    ) -> schemas.LabelResponse:
        """라벨 생성."""
        label = service.create_label(project_id, request, user_id)
        return schemas.LabelResponse.model_validate(label, from_attributes=True)

    @app.patch("/v1/labels/{label_id}", response_model=schemas.LabelResponse)
    def update_project_label(
        label_id: str,
        request: schemas.LabelUpdateRequest,
        service: ProjectService = Depends(get_project_service),
        user_id: str = Depends(get_current_user),
    ) -> schemas.LabelResponse:
        label = service.update_label(label_id, request, user_id)
        return schemas.LabelResponse.model_validate(label, from_attributes=True)

    @app.delete("/v1/labels/{label_id}", response_model=schemas.LabelResponse)
    def delete_project_label(
        label_id: str,
        service: ProjectService = Depends(get_project_service),
        user_id: str = Depends(get_current_user),
    ) -> schemas.LabelResponse:
        label = service.delete_label(label_id, user_id)
        return schemas.LabelResponse.model_validate(label, from_attributes=True)

    # ========================================================================
    # 워크스페이스
    # ========================================================================

    @app.post("/v1/workspaces", response_model=schemas.WorkspaceResponse, status_code=201)
    def create_workspace(
        request: schemas.WorkspaceCreateRequest,
        service: WorkspaceService = Depends(get_workspace_service),
        user_id: str = Depends(get_current_user),
    ) -> schemas.WorkspaceResponse:
        """워크스페이스 생성."""
        workspace = service.create_workspace(request, user_id)
        return schemas.WorkspaceResponse.model_validate(workspace, from_attributes=True)

    @app.get("/v1/workspaces/{short_name}", response_model=schemas.WorkspaceResponse)
    def get_workspace(
        short_name: str,
        service: WorkspaceService = Depends(get_workspace_service),
        user_id: str = Depends(get_current_user),
    ) -> schemas.WorkspaceResponse:
        workspace = service.get_workspace(short_name, user_id)
        return schemas.WorkspaceResponse.model_validate(workspace, from_attributes=True)

    @app.get(
        "/v1/workspaces/{short_name}/members",
        response_model=schemas.WorkspaceMembersResponse,
    )
    def list_workspace_members(
        short_name: str,
        service: WorkspaceService = Depends(get_workspace_service),
        user_id: str = Depends(get_current_user),
    ) -> schemas.WorkspaceMembersResponse:
        """워크스페이스 멤버 테이블."""
        return service.list_workspace_members(short_name, user_id)

    @app.post("/v1/workspaces/{short_name}/join", response_model=schemas.WorkspaceResponse)
    def join_workspace(
        short_name: str,
        service: WorkspaceService = Depends(get_workspace_service),
        user_id: str = Depends(get_current_user),
    ) -> schemas.WorkspaceResponse:
        workspace = service.join_workspace(short_name, user_id)
        return schemas.WorkspaceResponse.model_validate(workspace, from_attributes=True)

    return app
