from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Mapping, Optional

import structlog


@dataclass(frozen=True)
class AuditEvent:
    action: str
    actor: str
    resource_type: str
    resource_id: str
    project_id: Optional[str] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)


class AuditLogger:
    """Structured logger for board mutations."""

    def __init__(
        self,
        *,
        enabled: bool = True,
        logger_name: str = "board.audit",
        redact_fields: Iterable[str] = (),
    ) -> None:
        self._enabled = enabled
        self._logger = structlog.get_logger(logger_name)
        self._redact_fields = set(redact_fields)

    def log(self, event: AuditEvent) -> None:
        if not self._enabled:
            return
        now = datetime.now(timezone.utc).isoformat()
        self._logger.info(
            "audit_event",
            timestamp=now,
            action=event.action,
            actor=event.actor,
            resource_type=event.resource_type,
            resource_id=event.resource_id,
            project_id=event.project_id,
            metadata=self._sanitize(event.metadata),
        )

    def _sanitize(self, metadata: Mapping[str, Any]) -> Dict[str, Any]:
        sanitized: Dict[str, Any] = {}
        for key, value in metadata.items():
            if key in self._redact_fields:
                sanitized[key] = "***"
            else:
                sanitized[key] = value
        return sanitized


__all__ = ["AuditEvent", "AuditLogger"]
