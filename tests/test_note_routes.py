"""API tests for the authenticated notes endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient

from facenotes.security import create_access_token

from .conftest import descriptor


def test_notes_require_token(client: TestClient) -> None:
    assert client.get("/api/notes").status_code == 401
    response = client.get("/api/notes", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401
    assert response.json()["success"] is False


def test_expired_token_is_rejected(client: TestClient) -> None:
    token = create_access_token({"sub": "1"}, expires_minutes=-1)

    response = client.get("/api/notes", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_note_crud_flow(client: TestClient, auth_headers: dict[str, str]) -> None:
    created = client.post(
        "/api/notes",
        json={"title": "Buy milk", "content": "2 litres", "priority": "high"},
        headers=auth_headers,
    )
    assert created.status_code == 201
    note = created.json()
    assert note["title"] == "Buy milk"
    assert note["priority"] == "high"
    assert note["completed"] is False
    assert note["userId"] == "1"

    listed = client.get("/api/notes", headers=auth_headers).json()
    assert [n["id"] for n in listed] == [note["id"]]

    updated = client.put(
        f"/api/notes/{note['id']}", json={"completed": True}, headers=auth_headers
    )
    assert updated.status_code == 200
    assert updated.json()["completed"] is True
    assert updated.json()["title"] == "Buy milk"

    fetched = client.get(f"/api/notes/{note['id']}", headers=auth_headers)
    assert fetched.json()["completed"] is True

    deleted = client.delete(f"/api/notes/{note['id']}", headers=auth_headers)
    assert deleted.json() == {"message": "Note deleted successfully"}
    assert client.get(f"/api/notes/{note['id']}", headers=auth_headers).status_code == 404


def test_create_note_requires_title(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.post("/api/notes", json={"content": "no title"}, headers=auth_headers)

    assert response.status_code == 400
    assert "title" in response.json()["message"]


def test_invalid_priority_is_rejected(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.post(
        "/api/notes", json={"title": "x", "priority": "urgent"}, headers=auth_headers
    )

    assert response.status_code == 400


def test_notes_are_private(client: TestClient, auth_headers: dict[str, str]) -> None:
    note = client.post("/api/notes", json={"title": "secret"}, headers=auth_headers).json()

    client.post("/api/users/register", json={"name": "Bob", "faceDescriptor": descriptor(5.0)})
    bob = client.post("/api/users/authenticate", json={"faceDescriptor": descriptor(5.0)}).json()
    bob_headers = {"Authorization": f"Bearer {bob['accessToken']}"}

    assert client.get("/api/notes", headers=bob_headers).json() == []
    assert client.get(f"/api/notes/{note['id']}", headers=bob_headers).status_code == 404
    assert client.delete(f"/api/notes/{note['id']}", headers=bob_headers).status_code == 404


def test_update_missing_note(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.put("/api/notes/999", json={"title": "x"}, headers=auth_headers)

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Note not found"}
