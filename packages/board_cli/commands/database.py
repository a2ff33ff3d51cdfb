"""Database maintenance commands."""

from __future__ import annotations

from argparse import _SubParsersAction, Namespace

from packages.board.service import BoardDatabase, init_engine

from ..config import RuntimeConfig

__all__ = ["register", "run_init_db"]


def register(subparsers: _SubParsersAction) -> None:
    parser = subparsers.add_parser("init-db", help="Create the board tables")
    parser.set_defaults(handler=run_init_db)


def run_init_db(args: Namespace, config: RuntimeConfig) -> None:  # noqa: ARG001
    engine = init_engine(config.settings)
    try:
        BoardDatabase(engine).create_all()
    finally:
        engine.dispose()
    print(f"Tables created at {engine.url.render_as_string(hide_password=True)}")
