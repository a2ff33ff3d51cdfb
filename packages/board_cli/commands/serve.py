"""Run the board FastAPI service."""

from __future__ import annotations

from argparse import _SubParsersAction, Namespace

from ..config import RuntimeConfig

__all__ = ["register", "run"]


def register(subparsers: _SubParsersAction) -> None:
    parser = subparsers.add_parser("serve", help="Run the board API server")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8082)
    parser.set_defaults(handler=run)


def run(args: Namespace, config: RuntimeConfig) -> None:
    from packages.board import create_app

    import uvicorn

    host = getattr(args, "host", "127.0.0.1")
    port = int(getattr(args, "port", 8082))
    app = create_app(config.settings)

    print(f"Starting board API server on http://{host}:{port}")
    print(f"API docs at http://{host}:{port}/docs")

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=config.log_level.lower(),
    )
