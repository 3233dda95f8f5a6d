# tests/test_shopping_list_api.py
from __future__ import annotations

from tests.conftest import auth, new_diet


def _url(diet_id: int) -> str:
    return f"/api/v1/diets/{diet_id}/shopping-list"


def _status(client, diet_id, h) -> str:
    return client.get(f"/api/v1/diets/{diet_id}", headers=h).json()["status"]


def test_empty_list_rejected(client):
    h = auth()
    diet = new_diet(client, h)
    r = client.post(_url(diet["id"]), json={"items": []}, headers=h)
    assert r.status_code == 400
    assert any("must contain at least one item" in d for d in r.json()["details"])


def test_too_many_items_rejected(client):
    h = auth()
    diet = new_diet(client, h)
    r = client.post(_url(diet["id"]), json={"items": [f"item {i}" for i in range(101)]}, headers=h)
    assert r.status_code == 400
    assert any("cannot contain more than 100 items" in d for d in r.json()["details"])


def test_overlong_item_rejected(client):
    h = auth()
    diet = new_diet(client, h)
    r = client.post(_url(diet["id"]), json={"items": ["milk", "x" * 201]}, headers=h)
    assert r.status_code == 400
    assert any("offending positions: 1" in d for d in r.json()["details"])


def test_list_completes_diet_with_meals(client):
    h = auth()
    diet = new_diet(client, h)
    client.post(
        f"/api/v1/diets/{diet['id']}/meals",
        json={"meals": [{"day": 0, "meal_type": "lunch"}]},
        headers=h,
    )
    r = client.post(_url(diet["id"]), json={"items": ["milk - 1 l", "eggs - 6 pcs"]}, headers=h)
    assert r.status_code == 201
    assert _status(client, diet["id"], h) == "ready"

    got = client.get(_url(diet["id"]), headers=h).json()
    assert got["id"] == r.json()["shopping_list_id"]
    assert got["items"] == ["milk - 1 l", "eggs - 6 pcs"]


def test_list_without_meals_leaves_draft(client):
    h = auth()
    diet = new_diet(client, h)
    assert client.post(_url(diet["id"]), json={"items": ["milk"]}, headers=h).status_code == 201
    assert _status(client, diet["id"], h) == "draft"


def test_second_list_conflicts(client):
    h = auth()
    diet = new_diet(client, h)
    client.post(_url(diet["id"]), json={"items": ["milk"]}, headers=h)
    r = client.post(_url(diet["id"]), json={"items": ["bread"]}, headers=h)
    assert r.status_code == 409
    assert r.json()["error"] == "SHOPPING_LIST_ALREADY_EXISTS"


def test_missing_list_and_missing_diet(client):
    h = auth()
    diet = new_diet(client, h)
    r = client.get(_url(diet["id"]), headers=h)
    assert r.status_code == 404
    assert r.json()["error"] == "SHOPPING_LIST_NOT_FOUND"
    assert client.get(_url(999), headers=h).json()["error"] == "DIET_NOT_FOUND"


def test_archived_diet_rejects_list(client):
    h = auth()
    diet = new_diet(client, h)
    client.delete(f"/api/v1/diets/{diet['id']}", headers=h)
    r = client.post(_url(diet["id"]), json={"items": ["milk"]}, headers=h)
    assert r.status_code == 409
    assert r.json()["error"] == "DIET_ARCHIVED"
