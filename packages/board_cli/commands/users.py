"""Bootstrap commands for users and workspaces."""

from __future__ import annotations

from argparse import _SubParsersAction, Namespace

from packages.board import schemas
from packages.board.service import BoardDatabase, WorkspaceService, init_engine

from ..config import RuntimeConfig

__all__ = ["register", "run_create_user", "run_create_workspace"]


def register(subparsers: _SubParsersAction) -> None:
    user_parser = subparsers.add_parser("create-user", help="Create a board user")
    user_parser.add_argument("name")
    user_parser.add_argument("--email")
    user_parser.add_argument("--image")
    user_parser.set_defaults(handler=run_create_user)

    ws_parser = subparsers.add_parser("create-workspace", help="Create a workspace")
    ws_parser.add_argument("short_name")
    ws_parser.add_argument("--name", help="Display name (default: short name)")
    ws_parser.add_argument("--owner", required=True, help="Id of the creating user")
    ws_parser.set_defaults(handler=run_create_workspace)


def _service(config: RuntimeConfig):
    engine = init_engine(config.settings)
    database = BoardDatabase(engine)
    database.create_all()
    return engine, WorkspaceService(session=database.session(), settings=config.settings)


def run_create_user(args: Namespace, config: RuntimeConfig) -> None:
    engine, service = _service(config)
    try:
        user = service.create_user(
            schemas.UserCreateRequest(name=args.name, email=args.email, image=args.image)
        )
        print(user.id)
    finally:
        service.session.close()
        engine.dispose()


def run_create_workspace(args: Namespace, config: RuntimeConfig) -> None:
    engine, service = _service(config)
    try:
        workspace = service.create_workspace(
            schemas.WorkspaceCreateRequest(
                name=args.name or args.short_name, short_name=args.short_name
            ),
            args.owner,
        )
        print(workspace.id)
    finally:
        service.session.close()
        engine.dispose()
