from fastapi.testclient import TestClient

from tests.utils.auth import get_user_authentication_headers

BASE = "/api/v1/me/character-sheet"


def test_sheet_is_created_on_first_read(client: TestClient) -> None:
    headers = get_user_authentication_headers(uid="u_a")

    response = client.get(BASE, headers=headers)

    assert response.status_code == 200
    content = response.json()
    assert content["level"] == 1
    assert content["attributes"] == {
        "str": 10, "dex": 10, "con": 10, "int": 10, "wis": 10, "cha": 10
    }
    assert [c["name"] for c in content["inventoryCategories"]] == ["General"]


def test_edit_sheet(client: TestClient) -> None:
    """
    Tests field edits, attributes, skills and inventory through the API.
    """
    headers = get_user_authentication_headers(uid="u_a")

    fields = client.patch(
        BASE, headers=headers, json={"characterName": "Vex", "level": 3, "currency": -10}
    )
    attribute = client.put(f"{BASE}/attributes/int", headers=headers, json={"value": 16})
    skill_sheet = client.post(f"{BASE}/skills", headers=headers)
    skill_id = skill_sheet.json()["skills"][0]["id"]
    skill = client.patch(
        f"{BASE}/skills/{skill_id}", headers=headers, json={"name": "Rage", "usedCount": 2}
    )
    general_id = fields.json()["inventoryCategories"][0]["id"]
    item_sheet = client.post(f"{BASE}/inventory/{general_id}/items", headers=headers)
    item_id = item_sheet.json()["inventoryCategories"][0]["items"][0]["id"]
    item = client.put(
        f"{BASE}/inventory/{general_id}/items/{item_id}",
        headers=headers,
        json={"name": "Rope", "quantity": 2},
    )

    assert fields.json()["characterName"] == "Vex"
    assert fields.json()["currency"] == 0
    assert attribute.json()["attributes"]["int"] == 16
    assert skill.json()["skills"][0] == {
        "id": skill_id,
        "name": "Rage",
        "usesPer": "",
        "usedCount": 2,
        "description": "",
    }
    assert item.json()["inventoryCategories"][0]["items"] == [
        {"id": item_id, "name": "Rope", "quantity": 2}
    ]


def test_unknown_attribute_and_missing_skill(client: TestClient) -> None:
    headers = get_user_authentication_headers(uid="u_a")

    bad_key = client.put(f"{BASE}/attributes/luck", headers=headers, json={"value": 1})
    missing = client.delete(f"{BASE}/skills/skill_nope", headers=headers)

    assert bad_key.status_code == 400
    assert missing.status_code == 404
    assert missing.json()["error"]["message"] == "Skill not found."


def test_sheets_are_per_member(client: TestClient) -> None:
    client.patch(
        BASE, headers=get_user_authentication_headers(uid="u_a"), json={"characterName": "Vex"}
    )

    other = client.get(BASE, headers=get_user_authentication_headers(uid="u_b"))

    assert other.json()["characterName"] == ""
