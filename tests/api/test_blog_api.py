from fastapi.testclient import TestClient

from clubhouse import crud
from clubhouse.schemas.rich_text import paragraph_doc
from tests.utils.auth import get_user_authentication_headers
from tests.utils.user import create_admin, create_member

ADMIN = "admin_1"


def post_payload(title: str, **extra) -> dict:
    return {"title": title, "tags": ["News"], "contentJson": paragraph_doc("Bring dice."), **extra}


def test_create_post(client: TestClient, store) -> None:
    """
    Tests publishing a post; the slug comes from the title.
    """
    create_admin(store)
    headers = get_user_authentication_headers(uid=ADMIN)

    response = client.post("/api/v1/blog", headers=headers, json=post_payload("My Title!!"))

    assert response.status_code == 201
    content = response.json()
    assert content["slug"] == "my-title"
    assert content["contentText"] == "Bring dice."
    assert content["authorAliasSnapshot"] == "Warden"
    assert content["tags"] == ["News"]


def test_create_post_with_event(client: TestClient, store) -> None:
    create_admin(store)
    headers = get_user_authentication_headers(uid=ADMIN)

    response = client.post(
        "/api/v1/blog",
        headers=headers,
        json=post_payload(
            "Game Night", createEvent=True, eventStartAt="2026-11-07T18:30:00Z"
        ),
    )

    assert response.status_code == 201
    post = response.json()
    event = client.get(f"/api/v1/events/{post['linkedEventId']}").json()
    assert event["linkedBlogPostId"] == post["id"]
    assert event["linkedBlogSlug"] == "game-night"
    assert event["startAt"] == "2026-11-07T18:30:00Z"


def test_event_without_start_is_rejected(client: TestClient, store) -> None:
    create_admin(store)
    headers = get_user_authentication_headers(uid=ADMIN)

    response = client.post(
        "/api/v1/blog", headers=headers, json=post_payload("Game Night", createEvent=True)
    )

    assert response.status_code == 400
    assert response.json()["error"]["field"] == "eventStartAt"


def test_duplicate_title_returns_409(client: TestClient, store) -> None:
    create_admin(store)
    headers = get_user_authentication_headers(uid=ADMIN)
    client.post("/api/v1/blog", headers=headers, json=post_payload("Dragon Night"))

    response = client.post("/api/v1/blog", headers=headers, json=post_payload("DRAGON night"))

    assert response.status_code == 409
    assert response.json()["error"]["message"] == (
        "That title is already taken. Change the title slightly."
    )


def test_player_cannot_publish(client: TestClient, store) -> None:
    create_member(store, "u_a", alias="Rook")
    headers = get_user_authentication_headers(uid="u_a")

    response = client.post("/api/v1/blog", headers=headers, json=post_payload("Hello There"))

    assert response.status_code == 403


def test_unknown_rich_text_node_returns_400(client: TestClient, store) -> None:
    create_admin(store)
    headers = get_user_authentication_headers(uid=ADMIN)
    payload = post_payload("Sneaky")
    payload["contentJson"] = {"type": "doc", "content": [{"type": "script"}]}

    response = client.post("/api/v1/blog", headers=headers, json=payload)

    assert response.status_code == 400


def test_read_list_update_and_delete(client: TestClient, store) -> None:
    # ARRANGE
    create_admin(store)
    headers = get_user_authentication_headers(uid=ADMIN)
    post = client.post("/api/v1/blog", headers=headers, json=post_payload("Session Zero")).json()

    # ACT
    by_slug = client.get("/api/v1/blog/session-zero")
    listing = client.get("/api/v1/blog", params={"tag": "News"})
    updated = client.put(
        f"/api/v1/blog/posts/{post['id']}", headers=headers, json=post_payload("Session One")
    )

    # ASSERT
    assert by_slug.status_code == 200
    assert by_slug.json()["id"] == post["id"]
    assert [p["id"] for p in listing.json()] == [post["id"]]
    assert updated.status_code == 200
    assert updated.json()["slug"] == "session-one"
    assert client.get("/api/v1/blog/session-zero").status_code == 404

    # ACT
    deleted = client.delete(f"/api/v1/blog/posts/{post['id']}", headers=headers)

    # ASSERT
    assert deleted.status_code == 204
    assert crud.blog_post.get(store, post["id"]) is None
    assert client.get("/api/v1/blog/session-one").status_code == 404


def test_missing_post_returns_404_error_body(client: TestClient) -> None:
    response = client.get("/api/v1/blog/nothing-here")

    assert response.status_code == 404
    assert response.json()["error"] == {
        "category": "not_found_error",
        "message": "Post not found.",
        "timestamp": response.json()["error"]["timestamp"],
        "path": "/api/v1/blog/nothing-here",
    }
