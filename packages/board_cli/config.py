"""Runtime configuration helpers shared by CLI commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from packages.board.service import BoardSettings
from packages.env import load_env


@dataclass(frozen=True)
class RuntimeConfig:
    """Resolved configuration for command handlers."""

    log_level: str
    settings: BoardSettings


def bootstrap() -> None:
    """Load environment variables once."""

    load_env()


def build_runtime_config(*, log_level: str, db_url: Optional[str] = None) -> RuntimeConfig:
    """Construct a :class:`RuntimeConfig`, honoring a ``--db-url`` override."""

    settings = BoardSettings.from_env()
    if db_url:
        settings = BoardSettings(
            database_url=db_url,
            enable_audit=settings.enable_audit,
            enforce_lead_on_update=settings.enforce_lead_on_update,
            cors_origins=settings.cors_origins,
        )
    return RuntimeConfig(log_level=log_level, settings=settings)
