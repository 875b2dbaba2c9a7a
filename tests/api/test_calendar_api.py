from fastapi.testclient import TestClient

from clubhouse import crud
from tests.utils.auth import get_user_authentication_headers
from tests.utils.blog import create_post
from tests.utils.calendar import START
from tests.utils.user import create_admin, create_member, create_officer

EVENT = {
    "title": "One-shot Night",
    "startAt": "2026-11-07T18:30:00Z",
    "endAt": "2026-11-07T21:45:00Z",
}


def test_staff_create_move_and_delete_event(client: TestClient, store) -> None:
    """
    Tests the calendar editor flow: create, drag to another day, delete.
    """
    create_officer(store)
    headers = get_user_authentication_headers(uid="officer_1")

    created = client.post("/api/v1/events", headers=headers, json=EVENT)
    event_id = created.json()["id"]
    moved = client.post(
        f"/api/v1/events/{event_id}/move", headers=headers, json={"targetDay": "2026-11-20"}
    )
    deleted = client.delete(f"/api/v1/events/{event_id}", headers=headers)

    assert created.status_code == 201
    assert moved.status_code == 200
    assert moved.json()["startAt"] == "2026-11-20T18:30:00Z"
    assert moved.json()["endAt"] == "2026-11-20T21:45:00Z"
    assert deleted.status_code == 204
    assert client.get(f"/api/v1/events/{event_id}").status_code == 404


def test_player_cannot_create_event(client: TestClient, store) -> None:
    create_member(store, "u_a", alias="Rook")
    headers = get_user_authentication_headers(uid="u_a")

    response = client.post("/api/v1/events", headers=headers, json=EVENT)

    assert response.status_code == 403
    assert response.json()["error"]["message"] == "Only staff can change the calendar."


def test_link_event_to_post_by_title(client: TestClient, store) -> None:
    admin = create_admin(store)
    post = create_post(store, admin, "The Sunless Citadel")
    headers = get_user_authentication_headers(uid="admin_1")

    response = client.post(
        "/api/v1/events",
        headers=headers,
        json={**EVENT, "blogQuery": "The Sunless Citadel"},
    )

    assert response.status_code == 201
    assert response.json()["linkedBlogSlug"] == "the-sunless-citadel"
    refreshed = crud.blog_post.get(store, post.id)
    assert refreshed.linked_event_id == response.json()["id"]


def test_unknown_blog_query_returns_400(client: TestClient, store) -> None:
    create_officer(store)
    headers = get_user_authentication_headers(uid="officer_1")

    response = client.post(
        "/api/v1/events", headers=headers, json={**EVENT, "blogQuery": "/blog/missing"}
    )

    assert response.status_code == 400
    assert response.json()["error"]["field"] == "blogQuery"


def test_list_events_is_public(client: TestClient, store) -> None:
    admin = create_admin(store)
    create_post(store, admin, "Game Night", create_event=True, start=START)

    response = client.get(
        "/api/v1/events",
        params={"start": "2026-11-01T00:00:00Z", "end": "2026-12-01T00:00:00Z"},
    )

    assert response.status_code == 200
    assert [e["title"] for e in response.json()] == ["Game Night"]


def test_rsvp_flow(client: TestClient, store) -> None:
    admin = create_admin(store)
    post = create_post(store, admin, "Game Night", create_event=True, start=START)
    create_member(store, "u_a", alias="Rook")
    headers = get_user_authentication_headers(uid="u_a")
    base = f"/api/v1/events/{post.linked_event_id}"

    before = client.get(f"{base}/rsvp", headers=headers)
    attending = client.put(f"{base}/rsvp", headers=headers)
    mine = client.get(f"{base}/rsvp", headers=headers)
    attendees = client.get(f"{base}/rsvps")
    withdrawn = client.delete(f"{base}/rsvp", headers=headers)

    assert before.json()["attending"] is False
    assert attending.status_code == 200
    assert attending.json() == {"eventId": post.linked_event_id, "attending": True}
    assert [a["aliasSnapshot"] for a in attendees.json()] == ["Rook"]
    assert mine.json() == {"eventId": post.linked_event_id, "attending": True}
    assert withdrawn.json()["attending"] is False
    assert client.get(f"{base}/rsvp", headers=headers).json()["attending"] is False
    assert client.get(f"{base}/rsvps").json() == []


def test_rsvp_without_alias_returns_400(client: TestClient, store) -> None:
    admin = create_admin(store)
    post = create_post(store, admin, "Game Night", create_event=True, start=START)
    headers = get_user_authentication_headers(uid="u_new")

    response = client.put(f"/api/v1/events/{post.linked_event_id}/rsvp", headers=headers)

    assert response.status_code == 400


def test_rsvp_status_for_missing_event_returns_404(client: TestClient, store) -> None:
    create_member(store, "u_a", alias="Rook")
    headers = get_user_authentication_headers(uid="u_a")

    response = client.get("/api/v1/events/evt_nope/rsvp", headers=headers)

    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Event not found."
