"""
Shared fixtures for the board test suite
"""
from pathlib import Path

import pytest

from packages.board import schemas
from packages.board.service import (
    BoardDatabase,
    BoardSettings,
    ProjectService,
    WorkspaceService,
    init_engine,
)


@pytest.fixture()
def temp_db_path(tmp_path: Path) -> Path:
    return tmp_path / "board.db"


@pytest.fixture()
def board_settings(temp_db_path: Path) -> BoardSettings:
    return BoardSettings(database_url=f"sqlite:///{temp_db_path}")


@pytest.fixture()
def board_session(board_settings):
    engine = init_engine(board_settings)
    database = BoardDatabase(engine)
    database.create_all()
    session = database.session()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture()
def workspace_service(board_session, board_settings) -> WorkspaceService:
    return WorkspaceService(session=board_session, settings=board_settings)


@pytest.fixture()
def project_service(board_session, board_settings) -> ProjectService:
    return ProjectService(session=board_session, settings=board_settings)


@pytest.fixture()
def make_user(workspace_service):
    """Factory creating persisted users."""

    def _make(name: str, image: str | None = None):
        return workspace_service.create_user(schemas.UserCreateRequest(name=name, image=image))

    return _make


@pytest.fixture()
def acme(workspace_service, make_user):
    """Workspace ``acme`` created by Alice. Returns ``(workspace, alice)``."""

    alice = make_user("Alice")
    workspace = workspace_service.create_workspace(
        schemas.WorkspaceCreateRequest(name="Acme", short_name="acme"),
        alice.id,
    )
    return workspace, alice
