"""HTTP API behaviour against a temporary SQLite database."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from docspace.api.dependencies import get_model_invoker
from docspace.api.main import app
from docspace.services import config as config_module
from docspace.models.user import UserRole
from docspace.services.auth import AuthService
from docspace.services.users import UserService
from docspace.workspace.interfaces import ModelHTTPError, ModelInvoker


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides = {}


@pytest.fixture
def invoker():
    mock = AsyncMock(spec=ModelInvoker)
    mock.invoke.return_value = "Model output"
    app.dependency_overrides[get_model_invoker] = lambda: mock
    return mock


def auth_headers(user_id: str = "alice") -> dict:
    return {"Authorization": f"Bearer {AuthService().create_jwt(user_id)}"}


def _folder(client, name="Notes", user="alice", parent_id=None) -> dict:
    response = client.post(
        "/api/folders", json={"name": name, "parent_id": parent_id}, headers=auth_headers(user)
    )
    assert response.status_code == 201, response.text
    return response.json()


def _document(client, folder_id, title="Draft", content="", user="alice") -> dict:
    response = client.post(
        "/api/documents",
        json={"title": title, "folder_id": folder_id, "content": content},
        headers=auth_headers(user),
    )
    assert response.status_code == 201, response.text
    return response.json()


def _configure_ai(client, user="alice", api_key="sk-live") -> None:
    response = client.put(
        "/api/me/ai-settings",
        json={
            "configs": [{"id": "gpt", "name": "GPT-4o", "api_key": api_key, "model": "gpt-4o"}],
            "prompts": [{"id": "sum", "name": "Summarize", "content": "Summarize."}],
        },
        headers=auth_headers(user),
    )
    assert response.status_code == 200, response.text


def test_missing_token_is_rejected(client) -> None:
    response = client.get("/api/folders")

    assert response.status_code == 401
    assert response.json() == {
        "error": "unauthorized",
        "message": "Authorization header required",
        "detail": None,
    }


def test_garbage_token_is_rejected(client) -> None:
    response = client.get("/api/folders", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["error"] == "invalid_token"


def test_folder_lifecycle_and_tree(client) -> None:
    root = _folder(client, "Work")
    child = _folder(client, "Specs", parent_id=root["id"])
    _folder(client, "Hidden", user="bob")

    listed = client.get("/api/folders", headers=auth_headers()).json()
    tree = client.get("/api/folders/tree", headers=auth_headers()).json()

    assert sorted(f["name"] for f in listed) == ["Specs", "Work"]
    assert tree[0]["id"] == root["id"]
    assert tree[0]["children"][0]["id"] == child["id"]

    response = client.delete(f"/api/folders/{root['id']}", headers=auth_headers())
    assert response.status_code == 204
    assert client.get("/api/folders", headers=auth_headers()).json() == []


def test_blank_folder_name_is_a_validation_error(client) -> None:
    response = client.post("/api/folders", json={"name": "   "}, headers=auth_headers())

    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"


def test_document_crud(client) -> None:
    folder = _folder(client)
    doc = _document(client, folder["id"], content="# Hello")

    listed = client.get(f"/api/folders/{folder['id']}/documents", headers=auth_headers()).json()
    assert [d["id"] for d in listed] == [doc["id"]]

    patched = client.patch(
        f"/api/documents/{doc['id']}", json={"content": "# Bye"}, headers=auth_headers()
    )
    assert patched.status_code == 200
    assert patched.json()["content"] == "# Bye"
    assert patched.json()["title"] == "Draft"

    empty = client.patch(f"/api/documents/{doc['id']}", json={}, headers=auth_headers())
    assert empty.status_code == 400

    blank = client.patch(
        f"/api/documents/{doc['id']}", json={"title": "  "}, headers=auth_headers()
    )
    assert blank.status_code == 400

    assert client.delete(f"/api/documents/{doc['id']}", headers=auth_headers()).status_code == 204
    missing = client.get(f"/api/documents/{doc['id']}", headers=auth_headers())
    assert missing.status_code == 404
    assert missing.json()["error"] == "document_not_found"


def test_documents_are_private(client) -> None:
    folder = _folder(client)
    doc = _document(client, folder["id"])

    assert client.get(f"/api/documents/{doc['id']}", headers=auth_headers("bob")).status_code == 404
    response = client.post(
        "/api/documents",
        json={"title": "Intrusion", "folder_id": folder["id"]},
        headers=auth_headers("bob"),
    )
    assert response.status_code == 404
    assert response.json()["error"] == "folder_not_found"


def test_search_by_title(client) -> None:
    work = _folder(client, "Work")
    home = _folder(client, "Home")
    _document(client, work["id"], "Meeting notes")
    _document(client, home["id"], "Meeting agenda")

    everywhere = client.get("/api/search", params={"q": "MEETING"}, headers=auth_headers())
    scoped = client.get(
        "/api/search", params={"q": "meeting", "folder_id": work["id"]}, headers=auth_headers()
    )
    blank = client.get("/api/search", params={"q": "  "}, headers=auth_headers())

    assert len(everywhere.json()) == 2
    assert [d["title"] for d in scoped.json()] == ["Meeting notes"]
    assert blank.json() == []


def test_profile_and_ai_settings_masking(client) -> None:
    me = client.get("/api/me", headers=auth_headers()).json()
    assert me["user_id"] == "alice"
    assert me["is_admin"] is False

    profile = client.patch(
        "/api/me/profile", json={"avatar": "🦊", "site_name": "Alice Docs"}, headers=auth_headers()
    ).json()
    assert profile["avatar"] == "🦊"
    assert profile["site_name"] == "Alice Docs"

    _configure_ai(client, api_key="sk-live")
    _configure_ai(client, api_key="")
    view = client.get("/api/me/ai-settings", headers=auth_headers()).json()

    assert view["configs"][0]["api_key_set"] is True
    assert "api_key" not in view["configs"][0]
    assert "sk-live" not in str(view)


def test_transform_creates_new_document(client, invoker) -> None:
    folder = _folder(client)
    doc = _document(client, folder["id"], "Draft", "Long text")
    _configure_ai(client)

    response = client.post(
        f"/api/documents/{doc['id']}/transform",
        json={"config_id": "gpt", "prompt_id": "sum"},
        headers=auth_headers(),
    )

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["ok"] is True
    assert body["title"].startswith("Draft - GPT-4o - ")
    created = client.get(f"/api/documents/{body['document_id']}", headers=auth_headers()).json()
    assert created["content"] == "Model output"
    assert created["folder_id"] == folder["id"]
    invoker.invoke.assert_awaited_once_with(
        "https://api.openai.com/v1", "sk-live", "gpt-4o", "Summarize.", "Long text"
    )


def test_transform_failures_map_to_status(client, invoker) -> None:
    folder = _folder(client)
    doc = _document(client, folder["id"])
    _configure_ai(client)

    unknown = client.post(
        f"/api/documents/{doc['id']}/transform",
        json={"config_id": "nope", "prompt_id": "sum"},
        headers=auth_headers(),
    )
    assert unknown.status_code == 400
    assert unknown.json()["error"] == "config_not_found"

    invoker.invoke.side_effect = ModelHTTPError(401, "bad key")
    rejected = client.post(
        f"/api/documents/{doc['id']}/transform",
        json={"config_id": "gpt", "prompt_id": "sum"},
        headers=auth_headers(),
    )
    assert rejected.status_code == 502
    assert rejected.json()["error"] == "model_http_error"


def test_batch_transform_counts_failures(client, invoker) -> None:
    folder = _folder(client)
    ids = [_document(client, folder["id"], f"Doc {i}")["id"] for i in range(3)]
    _configure_ai(client)

    response = client.post(
        "/api/batch/transform",
        json={"document_ids": [ids[0], "missing", ids[2]], "config_id": "gpt", "prompt_id": "sum"},
        headers=auth_headers(),
    )

    assert response.json() == {"total": 3, "success": 2, "fail": 1}


def test_shared_ai_settings_from_admin(client, invoker, monkeypatch) -> None:
    monkeypatch.setenv("SHARED_AI_USER", "boss")
    config_module.reload_config()
    UserService().create_user("boss@example.com", UserRole.ADMIN, user_id="boss")
    _configure_ai(client, user="boss")
    folder = _folder(client, user="newbie")
    doc = _document(client, folder["id"], user="newbie")

    response = client.post(
        f"/api/documents/{doc['id']}/transform",
        json={"config_id": "gpt", "prompt_id": "sum"},
        headers=auth_headers("newbie"),
    )

    assert response.json()["ok"] is True


def test_admin_endpoints_require_admin(client, monkeypatch) -> None:
    assert client.get("/api/admin/users", headers=auth_headers()).status_code == 403

    monkeypatch.setenv("DEFAULT_EMAIL", "root@example.com")
    config_module.reload_config()
    UserService().create_user("root@example.com", user_id="root")

    created = client.post(
        "/api/admin/users",
        json={"user_id": "carol", "email": "carol@example.com", "role": "user"},
        headers=auth_headers("root"),
    )
    assert created.status_code == 201
    assert created.json()["is_admin"] is False
    duplicate = client.post(
        "/api/admin/users", json={"email": "carol@example.com"}, headers=auth_headers("root")
    )
    assert duplicate.status_code == 400
    assert duplicate.json()["error"] == "user_exists"

    role = client.patch(
        "/api/admin/users/alice/role", json={"role": "admin"}, headers=auth_headers("root")
    )
    assert role.status_code == 200
    assert role.json()["role"] == "admin"

    self_delete = client.delete("/api/admin/users/root", headers=auth_headers("root"))
    assert self_delete.status_code == 403
    assert self_delete.json()["error"] == "cannot_delete_self"

    assert client.delete("/api/admin/users/alice", headers=auth_headers("root")).status_code == 204
    users = client.get("/api/admin/users", headers=auth_headers("root")).json()
    assert [u["user_id"] for u in users] == ["root", "carol"]


def test_token_endpoint_issues_working_jwt(client) -> None:
    response = client.post("/api/tokens", headers=auth_headers())

    assert response.status_code == 200
    token = response.json()["token"]
    me = client.get("/api/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["user_id"] == "alice"
