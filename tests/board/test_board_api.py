"""Integration tests for the board FastAPI application."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from packages.board import create_app


@pytest.fixture()
def client(board_settings, board_session) -> TestClient:
    app = create_app(board_settings)
    return TestClient(app)


def _headers(user) -> dict[str, str]:
    return {"X-User-ID": user.id}


def _create_project(client, user, project_type="KANBAN", name="Board"):
    response = client.post(
        "/v1/projects",
        json={"name": name, "project_type": project_type, "workspace_short_name": "acme"},
        headers=_headers(user),
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_healthz(client) -> None:
    assert client.get("/healthz").json() == {"status": "ok"}


def test_requires_user_header(client, acme) -> None:
    missing = client.get("/v1/projects")
    assert missing.status_code == 401
    assert missing.json()["kind"] == "UNAUTHORIZED"

    unknown = client.get("/v1/projects", headers={"X-User-ID": "nobody"})
    assert unknown.status_code == 401


def test_project_flow(client, acme, make_user) -> None:
    workspace, alice = acme
    bob = make_user("Bob")

    project = _create_project(client, alice, "SCRUM", "Sprint Board")
    assert project["project_lead_id"] == alice.id
    assert project["workspace_id"] == workspace.id
    project_id = project["id"]

    board = client.get(f"/v1/projects/{project_id}/workflows", headers=_headers(alice))
    assert board.status_code == 200
    assert [w["title"] for w in board.json()] == [
        "Backlog",
        "To Do",
        "In Progress",
        "Review",
        "Done",
    ]
    assert all(w["issues"] == [] for w in board.json())

    assigned = client.post(
        f"/v1/projects/{project_id}/members",
        json={"workspace_id": workspace.id, "user_id": bob.id},
        headers=_headers(alice),
    )
    assert assigned.status_code == 200
    assert sorted(m["name"] for m in assigned.json()) == ["Alice", "Bob"]

    mine = client.get("/v1/projects/mine", headers=_headers(bob))
    assert [p["id"] for p in mine.json()] == [project_id]
    assert mine.json()[0]["project_lead"]["name"] == "Alice"

    updated = client.patch(
        f"/v1/projects/{project_id}",
        json={"name": "Renamed", "default_assignee_id": bob.id, "project_lead_id": alice.id},
        headers=_headers(bob),
    )
    assert updated.status_code == 200
    assert updated.json()["name"] == "Renamed"
    assert updated.json()["default_assignee_id"] == bob.id

    detail = client.get(f"/v1/projects/{project_id}", headers=_headers(alice)).json()
    assert detail["default_assignee"]["name"] == "Bob"
    assert detail["project_lead"]["name"] == "Alice"
    assert detail["labels"] == []


def test_get_missing_project_returns_null(client, acme) -> None:
    _, alice = acme
    response = client.get("/v1/projects/does-not-exist", headers=_headers(alice))
    assert response.status_code == 200
    assert response.json() is None

    members = client.get("/v1/projects/does-not-exist/members", headers=_headers(alice))
    assert members.json() is None


def test_create_project_unknown_workspace_is_not_found(client, acme) -> None:
    _, alice = acme
    response = client.post(
        "/v1/projects",
        json={"name": "Board", "project_type": "KANBAN", "workspace_short_name": "nope"},
        headers=_headers(alice),
    )
    assert response.status_code == 404
    assert response.json()["kind"] == "NOT_FOUND"


def test_create_project_invalid_type(client, acme) -> None:
    _, alice = acme
    response = client.post(
        "/v1/projects",
        json={"name": "Board", "project_type": "WATERFALL", "workspace_short_name": "acme"},
        headers=_headers(alice),
    )
    assert response.status_code == 422
    body = response.json()
    assert body["kind"] == "VALIDATION"
    assert body["errors"]


def test_delete_project_error_kinds(client, acme, make_user) -> None:
    _, alice = acme
    bob = make_user("Bob")
    project_id = _create_project(client, alice)["id"]

    rejected = client.delete(f"/v1/projects/{project_id}", headers=_headers(bob))
    assert rejected.status_code == 401
    assert rejected.json() == {
        "kind": "UNAUTHORIZED",
        "message": "You don't have access to delete the project",
    }

    deleted = client.delete(f"/v1/projects/{project_id}", headers=_headers(alice))
    assert deleted.status_code == 200
    assert deleted.json()["id"] == project_id

    again = client.delete(f"/v1/projects/{project_id}", headers=_headers(alice))
    assert again.status_code == 400
    assert again.json() == {"kind": "BAD_REQUEST", "message": "An unexpected error occurred"}


def test_label_validation_leaves_store_unchanged(client, acme) -> None:
    _, alice = acme
    project_id = _create_project(client, alice)["id"]

    short_title = client.post(
        f"/v1/projects/{project_id}/labels",
        json={"title": "Bug", "color": "#ff0000"},
        headers=_headers(alice),
    )
    assert short_title.status_code == 422
    bad_color = client.post(
        f"/v1/projects/{project_id}/labels",
        json={"title": "Bugfix", "color": "red"},
        headers=_headers(alice),
    )
    assert bad_color.status_code == 422

    labels = client.get(f"/v1/projects/{project_id}/labels", headers=_headers(alice))
    assert labels.json() == []


def test_label_lifecycle(client, acme) -> None:
    _, alice = acme
    project_id = _create_project(client, alice)["id"]

    created = client.post(
        f"/v1/projects/{project_id}/labels",
        json={"title": "Backend", "color": "#0000ff", "description": "API work"},
        headers=_headers(alice),
    )
    assert created.status_code == 201
    label = created.json()
    assert label["issue_count"] == 0

    updated = client.patch(
        f"/v1/labels/{label['id']}",
        json={"title": "Backend API", "color": "#0000aa"},
        headers=_headers(alice),
    )
    assert updated.status_code == 200
    assert updated.json()["description"] == "API work"

    deleted = client.delete(f"/v1/labels/{label['id']}", headers=_headers(alice))
    assert deleted.json()["id"] == label["id"]

    missing = client.delete(f"/v1/labels/{label['id']}", headers=_headers(alice))
    assert missing.status_code == 404


def test_workflow_routes(client, acme) -> None:
    _, alice = acme
    project_id = _create_project(client, alice)["id"]

    created = client.post(
        f"/v1/projects/{project_id}/workflows",
        json={"title": "Blocked"},
        headers=_headers(alice),
    )
    assert created.status_code == 201
    assert created.json()["index"] == 4

    board = client.get(f"/v1/projects/{project_id}/workflows", headers=_headers(alice)).json()
    todo = board[1]
    client.delete(f"/v1/workflows/{todo['id']}", headers=_headers(alice))

    board = client.get(f"/v1/projects/{project_id}/workflows", headers=_headers(alice)).json()
    assert [(w["index"], w["title"]) for w in board] == [
        (0, "Backlog"),
        (1, "In Progress"),
        (2, "Done"),
        (3, "Blocked"),
    ]

    missing = client.get("/v1/projects/does-not-exist/workflows", headers=_headers(alice))
    assert missing.status_code == 404


def test_workspace_routes(client, acme, make_user) -> None:
    _, alice = acme
    bob = make_user("Bob")

    joined = client.post("/v1/workspaces/acme/join", headers=_headers(bob))
    assert joined.status_code == 200

    members = client.get("/v1/workspaces/acme/members", headers=_headers(alice)).json()
    assert members["member_count"] == 2
    actions = {row["name"]: row["action"] for row in members["members"]}
    assert actions == {"Alice": "leave", "Bob": "remove"}

    duplicate = client.post(
        "/v1/workspaces",
        json={"name": "Other", "short_name": "acme"},
        headers=_headers(bob),
    )
    assert duplicate.status_code == 409
    assert duplicate.json()["kind"] == "CONFLICT"
