"""Command-line entry point for the board service."""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from typing import Callable, List, Optional

import structlog
from sqlalchemy.engine import make_url

from . import commands
from .config import RuntimeConfig, bootstrap, build_runtime_config

CommandHandler = Callable[[argparse.Namespace, RuntimeConfig], None]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="board-cli",
        description="Command-line tools for the Kanban/Scrum board service.",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO"),
        help="Logging level (CRITICAL, ERROR, WARNING, INFO, DEBUG). Default: INFO",
    )
    parser.add_argument(
        "--db-url",
        dest="db_url",
        help="Override the database URL (env: BOARD_DB_URL or DATABASE_URL)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    commands.register(subparsers)
    return parser


def configure_logging(level_name: str) -> None:
    level_value = getattr(logging, level_name.upper(), logging.INFO)
    timestamper = structlog.processors.TimeStamper(fmt="iso", key="timestamp")

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            timestamper,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.KeyValueRenderer(
            key_order=["timestamp", "level", "logger", "command", "event"],
            sort_keys=True,
        ),
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            timestamper,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    handler.setLevel(level_value)

    logging.basicConfig(level=level_value, handlers=[handler], force=True)


def _database_label(runtime: RuntimeConfig) -> str:
    """Database URL without credentials, for log context."""

    return make_url(runtime.settings.database_url).render_as_string(hide_password=True)


def main(argv: Optional[List[str]] = None) -> None:
    bootstrap()
    parser = build_parser()
    args = parser.parse_args(argv)

    level_name = str(getattr(args, "log_level", "INFO")).upper()
    configure_logging(level_name)

    handler: CommandHandler = getattr(args, "handler", None)
    if not callable(handler):
        parser.error("Command handler missing")

    runtime = build_runtime_config(
        log_level=level_name,
        db_url=getattr(args, "db_url", None),
    )

    structlog.contextvars.bind_contextvars(
        command=args.command,
        database=_database_label(runtime),
    )
    log = structlog.get_logger("board_cli")
    started = time.perf_counter()
    try:
        handler(args, runtime)
    except Exception:
        log.exception("command_failed")
        raise
    else:
        log.info("command_finished", elapsed_ms=round((time.perf_counter() - started) * 1000, 1))
    finally:
        structlog.contextvars.clear_contextvars()


if __name__ == "__main__":  # pragma: no cover
    main()
