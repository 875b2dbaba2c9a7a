from fastapi.testclient import TestClient

from tests.utils.auth import get_user_authentication_headers
from tests.utils.user import create_admin, create_member


def test_read_me_provisions_profile(client: TestClient) -> None:
    """
    Tests that the first authenticated call creates the member's profile.
    """
    headers = get_user_authentication_headers(uid="u_new", name="New Member")

    response = client.get("/api/v1/me", headers=headers)

    assert response.status_code == 200
    content = response.json()
    assert content["id"] == "u_new"
    assert content["roles"] == ["Player"]
    assert content["alias"] is None
    assert content["displayNameSnapshot"] == "New Member"
    assert content["accentColor"] == "#7c3aed"


def test_me_requires_token(client: TestClient) -> None:
    response = client.get("/api/v1/me")

    assert response.status_code == 401


def test_me_rejects_bad_token(client: TestClient) -> None:
    response = client.get("/api/v1/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


def test_claim_alias(client: TestClient) -> None:
    headers = get_user_authentication_headers(uid="u_a")

    response = client.put("/api/v1/me/alias", headers=headers, json={"alias": "  Rook "})

    assert response.status_code == 200
    assert response.json() == {"status": "claimed", "alias": "Rook"}
    assert client.get("/api/v1/me", headers=headers).json()["alias"] == "Rook"


def test_taken_alias_returns_409_error_body(client: TestClient, store) -> None:
    """
    Tests that an alias held by someone else, in any case, is refused with
    the structured error body.
    """
    create_member(store, "u_a", alias="Rook")
    headers = get_user_authentication_headers(uid="u_b")

    response = client.put("/api/v1/me/alias", headers=headers, json={"alias": "rook"})

    assert response.status_code == 409
    error = response.json()["error"]
    assert error["category"] == "conflict_error"
    assert error["message"] == "That alias is already taken."
    assert error["path"] == "/api/v1/me/alias"
    assert "timestamp" in error


def test_malformed_alias_returns_400(client: TestClient) -> None:
    headers = get_user_authentication_headers(uid="u_a")

    response = client.put("/api/v1/me/alias", headers=headers, json={"alias": "Ab"})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["category"] == "validation_error"
    assert error["field"] == "alias"


def test_missing_body_field_returns_400(client: TestClient) -> None:
    headers = get_user_authentication_headers(uid="u_a")

    response = client.put("/api/v1/me/alias", headers=headers, json={})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["message"] == "Request validation failed"
    assert error["errors"][0]["field"] == "body.alias"


def test_update_preferences(client: TestClient) -> None:
    headers = get_user_authentication_headers(uid="u_a")

    response = client.patch(
        "/api/v1/me/preferences",
        headers=headers,
        json={"pronouns": "they/them", "theme": "light", "accentColor": "#22C55E"},
    )

    assert response.status_code == 200
    content = response.json()
    assert content["pronouns"] == "they/them"
    assert content["theme"] == "light"
    assert content["accentColor"] == "#22c55e"


def test_admin_lists_and_grants_roles(client: TestClient, store) -> None:
    create_admin(store)
    create_member(store, "u_a", alias="Rook")
    headers = get_user_authentication_headers(uid="admin_1")

    listed = client.get("/api/v1/admin/users", headers=headers, params={"q": "rook"})
    granted = client.put(
        "/api/v1/admin/users/u_a/roles", headers=headers, json={"roles": ["DM", "Player"]}
    )

    assert listed.status_code == 200
    assert [u["id"] for u in listed.json()] == ["u_a"]
    assert granted.status_code == 200
    assert set(granted.json()["roles"]) == {"Player", "DM"}


def test_non_admin_cannot_manage_users(client: TestClient, store) -> None:
    create_member(store, "u_a", alias="Rook")
    headers = get_user_authentication_headers(uid="u_a")

    listed = client.get("/api/v1/admin/users", headers=headers)
    granted = client.put(
        "/api/v1/admin/users/u_a/roles", headers=headers, json={"roles": ["Admin"]}
    )

    assert listed.status_code == 403
    assert granted.status_code == 403
    assert listed.json()["error"]["category"] == "authorization_error"
