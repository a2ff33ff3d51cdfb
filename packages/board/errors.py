"""Error kinds reported by the board procedures."""

from __future__ import annotations

from enum import Enum

__all__ = [
    "ErrorKind",
    "BoardError",
    "UnauthorizedError",
    "BadRequestError",
]


class ErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    BAD_REQUEST = "BAD_REQUEST"
    VALIDATION = "VALIDATION"
    CONFLICT = "CONFLICT"
    INTERNAL = "INTERNAL"


class BoardError(RuntimeError):
    """Base error carrying a machine-readable kind and a short message."""

    kind: ErrorKind = ErrorKind.BAD_REQUEST
    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UnauthorizedError(BoardError):
    """Raised when the caller fails an ownership check."""

    kind = ErrorKind.UNAUTHORIZED
    status_code = 401


class BadRequestError(BoardError):
    """Raised when a failure is reported without its original cause."""

    kind = ErrorKind.BAD_REQUEST
    status_code = 400
