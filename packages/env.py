"""`.env` loading for the board service and CLI."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator, Union

from dotenv import find_dotenv, load_dotenv

PathLike = Union[str, Path]

ENV_FILE_VARIABLE = "BOARD_ENV_FILE"
_LOADED = False


def _candidates(extra_paths: Iterable[PathLike] | None) -> Iterator[Path]:
    explicit = os.getenv(ENV_FILE_VARIABLE)
    if explicit:
        yield Path(explicit).expanduser()
    for raw_path in extra_paths or ():
        yield Path(raw_path).expanduser()
    found = find_dotenv(usecwd=True)
    if found:
        yield Path(found)


def load_env(*, override: bool = False, extra_paths: Iterable[PathLike] | None = None) -> bool:
    """Load board settings from `.env` files.

    ``BOARD_ENV_FILE`` is read first, then *extra_paths*, then the nearest
    `.env` above the working directory. Each file is loaded at most once per
    call and earlier files win unless *override* is set.

    Returns:
        ``True`` if any file was loaded.
    """

    global _LOADED

    if _LOADED and not override and extra_paths is None:
        return True

    loaded_any = False
    seen: set[Path] = set()
    for path in _candidates(extra_paths):
        if not path.is_file():
            continue
        resolved = path.resolve()
        if resolved in seen:
            continue
        seen.add(resolved)
        loaded_any = load_dotenv(resolved, override=override) or loaded_any

    if not override:
        _LOADED = True

    return loaded_any
