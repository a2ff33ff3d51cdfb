"""Shared SQLAlchemy base and enum helpers for board models."""

from __future__ import annotations

import uuid

from sqlalchemy import Enum as SqlEnum
from sqlalchemy.orm import DeclarativeBase

from ..schema.enums import ProjectType, sa_enum

__all__ = [
    "Base",
    "ProjectType",
    "new_id",
    "project_type_enum",
]


class Base(DeclarativeBase):
    """Declarative base class shared by all board models."""


def new_id() -> str:
    """Primary keys are opaque non-empty strings."""

    return uuid.uuid4().hex


def project_type_enum() -> SqlEnum:
    """Return a configured ENUM for the ``project_type`` type."""

    return sa_enum(ProjectType)
