"""Narrow data-access interfaces used by the board services.

Each protocol covers one entity. The ``Sql*`` classes implement them on a
SQLAlchemy session; they flush but never commit, so the calling service owns
the transaction boundary.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, joinedload, selectinload

from .models import Issue, Label, Project, User, Workflow, Workspace
from .schema.enums import ProjectType

__all__ = [
    "UserRepository",
    "WorkspaceRepository",
    "ProjectRepository",
    "WorkflowRepository",
    "LabelRepository",
    "SqlUserRepository",
    "SqlWorkspaceRepository",
    "SqlProjectRepository",
    "SqlWorkflowRepository",
    "SqlLabelRepository",
]


class UserRepository(Protocol):
    def get(self, user_id: str) -> Optional[User]: ...

    def create(self, *, name: str, email: Optional[str], image: Optional[str]) -> User: ...


class WorkspaceRepository(Protocol):
    def get_by_short_name(self, short_name: str) -> Optional[Workspace]: ...

    def create(self, *, name: str, short_name: str, creator: User) -> Workspace: ...

    def add_member(self, workspace: Workspace, user: User) -> Workspace: ...


class ProjectRepository(Protocol):
    def list_all(self) -> list[Project]: ...

    def list_for_user(self, user_id: str) -> list[Project]: ...

    def get(self, project_id: str, *, detail: bool = False) -> Optional[Project]: ...

    def get_in_workspace(self, project_id: str, workspace_id: str) -> Optional[Project]: ...

    def create(
        self,
        *,
        name: str,
        project_type: ProjectType,
        lead: User,
        workspace: Workspace,
        workflows: Sequence[tuple[int, str]],
    ) -> Project: ...

    def add_member(self, project: Project, user: User) -> Project: ...

    def delete(self, project: Project) -> None: ...


class WorkflowRepository(Protocol):
    def list_board(self, project_id: str) -> list[Workflow]: ...

    def get(self, workflow_id: str) -> Optional[Workflow]: ...

    def append(self, project: Project, title: str) -> Workflow: ...

    def delete(self, workflow: Workflow) -> None: ...


class LabelRepository(Protocol):
    def list_for_project(self, project_id: str) -> list[Label]: ...

    def get(self, label_id: str) -> Optional[Label]: ...

    def create(
        self, *, project_id: str, title: str, color: str, description: Optional[str]
    ) -> Label: ...

    def save(self, label: Label) -> Label: ...

    def delete(self, label: Label) -> None: ...


class SqlUserRepository:
    def __init__(self, session: Session):
        self.session = session

    def get(self, user_id: str) -> Optional[User]:
        return self.session.get(User, user_id)

    def create(self, *, name: str, email: Optional[str], image: Optional[str]) -> User:
        user = User(name=name, email=email, image=image)
        self.session.add(user)
        self.session.flush()
        return user


class SqlWorkspaceRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_by_short_name(self, short_name: str) -> Optional[Workspace]:
        stmt = (
            select(Workspace)
            .where(Workspace.short_name == short_name)
            .options(selectinload(Workspace.members))
        )
        return self.session.execute(stmt).scalars().first()

    def create(self, *, name: str, short_name: str, creator: User) -> Workspace:
        workspace = Workspace(name=name, short_name=short_name, created_by_id=creator.id)
        workspace.members.append(creator)
        self.session.add(workspace)
        self.session.flush()
        return workspace

    def add_member(self, workspace: Workspace, user: User) -> Workspace:
        if user not in workspace.members:
            workspace.members.append(user)
            self.session.flush()
        return workspace


class SqlProjectRepository:
    def __init__(self, session: Session):
        self.session = session

    def list_all(self) -> list[Project]:
        stmt = (
            select(Project)
            .options(joinedload(Project.project_lead))
            .order_by(Project.name, Project.id)
        )
        return list(self.session.execute(stmt).scalars())

    def list_for_user(self, user_id: str) -> list[Project]:
        stmt = (
            select(Project)
            .where(
                or_(
                    Project.members.any(User.id == user_id),
                    Project.project_lead_id == user_id,
                )
            )
            .options(joinedload(Project.project_lead))
            .order_by(Project.name, Project.id)
        )
        return list(self.session.execute(stmt).scalars())

    def get(self, project_id: str, *, detail: bool = False) -> Optional[Project]:
        stmt = (
            select(Project)
            .where(Project.id == project_id)
            .execution_options(populate_existing=True)
        )
        if detail:
            stmt = stmt.options(
                selectinload(Project.members),
                joinedload(Project.project_lead),
                joinedload(Project.default_assignee),
                selectinload(Project.labels),
            )
        return self.session.execute(stmt).scalars().first()

    def get_in_workspace(self, project_id: str, workspace_id: str) -> Optional[Project]:
        stmt = select(Project).where(
            Project.id == project_id, Project.workspace_id == workspace_id
        )
        return self.session.execute(stmt).scalars().first()

    def create(
        self,
        *,
        name: str,
        project_type: ProjectType,
        lead: User,
        workspace: Workspace,
        workflows: Sequence[tuple[int, str]],
    ) -> Project:
        project = Project(
            name=name,
            project_type=project_type,
            project_lead_id=lead.id,
            workspace_id=workspace.id,
        )
        project.members.append(lead)
        project.workflows.extend(
            Workflow(title=title, index=index) for index, title in workflows
        )
        self.session.add(project)
        self.session.flush()
        return project

    def add_member(self, project: Project, user: User) -> Project:
        if user not in project.members:
            project.members.append(user)
            self.session.flush()
        return project

    def delete(self, project: Project) -> None:
        self.session.delete(project)
        self.session.flush()


class SqlWorkflowRepository:
    def __init__(self, session: Session):
        self.session = session

    def list_board(self, project_id: str) -> list[Workflow]:
        # Raises NoResultFound when the project is missing.
        self.session.execute(select(Project.id).where(Project.id == project_id)).scalar_one()
        stmt = (
            select(Workflow)
            .where(Workflow.project_id == project_id)
            .options(selectinload(Workflow.issues).selectinload(Issue.labels))
            .order_by(Workflow.index)
            .execution_options(populate_existing=True)
        )
        return list(self.session.execute(stmt).scalars())

    def get(self, workflow_id: str) -> Optional[Workflow]:
        return self.session.get(Workflow, workflow_id, populate_existing=True)

    def append(self, project: Project, title: str) -> Workflow:
        next_index = self.session.execute(
            select(func.coalesce(func.max(Workflow.index), -1) + 1).where(
                Workflow.project_id == project.id
            )
        ).scalar_one()
        workflow = Workflow(project_id=project.id, title=title, index=next_index)
        self.session.add(workflow)
        self.session.flush()
        return workflow

    def delete(self, workflow: Workflow) -> None:
        project_id, removed_index = workflow.project_id, workflow.index
        self.session.delete(workflow)
        self.session.flush()

        # Shift one row at a time so the (project_id, index) key never collides.
        later = self.session.execute(
            select(Workflow)
            .where(Workflow.project_id == project_id, Workflow.index > removed_index)
            .order_by(Workflow.index)
        ).scalars()
        for row in list(later):
            row.index -= 1
            self.session.flush()


class SqlLabelRepository:
    def __init__(self, session: Session):
        self.session = session

    def list_for_project(self, project_id: str) -> list[Label]:
        stmt = (
            select(Label)
            .where(Label.project_id == project_id)
            .order_by(Label.title)
            .execution_options(populate_existing=True)
        )
        return list(self.session.execute(stmt).scalars())

    def get(self, label_id: str) -> Optional[Label]:
        # Reload so issue_count reflects the current row before any delete.
        return self.session.get(Label, label_id, populate_existing=True)

    def create(
        self, *, project_id: str, title: str, color: str, description: Optional[str]
    ) -> Label:
        label = Label(project_id=project_id, title=title, color=color, description=description)
        self.session.add(label)
        self.session.flush()
        self.session.refresh(label)
        return label

    def save(self, label: Label) -> Label:
        self.session.flush()
        self.session.refresh(label)
        return label

    def delete(self, label: Label) -> None:
        self.session.delete(label)
        self.session.flush()
