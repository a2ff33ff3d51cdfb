"""Python packages for the board service monorepo.

``packages.board`` holds the models, procedures and HTTP API;
``packages.board_cli`` wraps them in the ``board-cli`` command.
"""

from __future__ import annotations

from .env import load_env

load_env()

__all__ = ["load_env"]
