from structlog.testing import capture_logs

from packages.board import schemas
from packages.board.audit import AuditEvent, AuditLogger


def test_audit_logger_redacts_metadata() -> None:
    audit = AuditLogger(redact_fields=["email"])
    event = AuditEvent(
        action="member.added",
        actor="u1",
        resource_type="member",
        resource_id="u2",
        project_id="p1",
        metadata={"email": "bob@example.com", "role": "member"},
    )

    with capture_logs() as logs:
        audit.log(event)

    assert len(logs) == 1
    record = logs[0]
    assert record["event"] == "audit_event"
    assert record["project_id"] == "p1"
    assert record["metadata"] == {"email": "***", "role": "member"}


def test_disabled_audit_logger_is_silent() -> None:
    audit = AuditLogger(enabled=False)

    with capture_logs() as logs:
        audit.log(AuditEvent("project.deleted", "u1", "project", "p1"))

    assert logs == []


def test_user_audit_event_hides_email(workspace_service) -> None:
    with capture_logs() as logs:
        user = workspace_service.create_user(
            schemas.UserCreateRequest(name="Dana", email="dana@example.com")
        )

    audit_events = [log for log in logs if log["event"] == "audit_event"]
    assert [e["action"] for e in audit_events] == ["user.created"]
    assert audit_events[0]["resource_id"] == user.id
    assert audit_events[0]["metadata"] == {"email": "***"}
