# tests/test_diets_api.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy.exc import OperationalError

from main import app
from services.db import get_session
from tests.conftest import auth, new_diet, new_generation

API = "/api/v1/diets"


def _body(generation_id: int, **kw):
    return {
        "number_of_days": 3,
        "calories_per_day": 2200,
        "preferred_cuisines": ["polish", "gluten-free"],
        "generation_id": generation_id,
        **kw,
    }


# ── create ──────────────────────────────────────────────────────────
def test_one_diet_per_generation(client):
    h = auth()
    gid = new_generation(client, h)

    first = client.post(API, json=_body(gid), headers=h)
    assert first.status_code == 201
    assert first.json()["status"] == "draft"
    assert first.json()["generation_id"] == gid

    second = client.post(API, json=_body(gid), headers=h)
    assert second.status_code == 409
    assert second.json()["error"] == "DIET_ALREADY_EXISTS"


def test_unknown_generation(client):
    r = client.post(API, json=_body(12345), headers=auth())
    assert r.status_code == 404
    assert r.json()["error"] == "GENERATION_NOT_FOUND"


def test_cannot_build_on_someone_elses_generation(client):
    gid = new_generation(client, auth("alice"))
    r = client.post(API, json=_body(gid), headers=auth("bob"))
    assert r.status_code == 404


def test_end_date_is_created_at_plus_days(client):
    h = auth()
    diet = new_diet(client, h, number_of_days=5)
    body = client.get(f"{API}/{diet['id']}", headers=h).json()

    start = datetime.fromisoformat(body["created_at"])
    end = datetime.fromisoformat(body["end_date"])
    assert (end - start).days == 5
    assert body["preferred_cuisines"] == ["polish"]
    assert body["meals"] == []


def test_invalid_body(client):
    h = auth()
    gid = new_generation(client, h)
    r = client.post(API, json=_body(gid, number_of_days=0), headers=h)
    assert r.status_code == 400


# ── read / list ─────────────────────────────────────────────────────
def test_get_unknown_or_foreign_diet(client):
    diet = new_diet(client, auth("alice"))
    assert client.get(f"{API}/{diet['id']}", headers=auth("bob")).status_code == 404
    r = client.get(f"{API}/4242", headers=auth("alice"))
    assert r.status_code == 404
    assert r.json() == {"error": "DIET_NOT_FOUND", "details": "Diet 4242 not found"}


def test_list_is_paged_newest_first(client):
    h = auth()
    ids = [new_diet(client, h)["id"] for _ in range(3)]
    new_diet(client, auth("someone-else"))

    page1 = client.get(API, params={"page": 1, "per_page": 2}, headers=h).json()
    page2 = client.get(API, params={"page": 2, "per_page": 2}, headers=h).json()

    assert page1["total"] == 3
    assert [d["id"] for d in page1["data"]] == ids[::-1][:2]
    assert [d["id"] for d in page2["data"]] == ids[:1]
    assert (page2["page"], page2["per_page"]) == (2, 2)


def test_per_page_is_bounded(client):
    h = auth()
    assert client.get(API, params={"per_page": 51}, headers=h).status_code == 400
    assert client.get(API, params={"page": 0}, headers=h).status_code == 400
    assert client.get(API, params={"per_page": 50}, headers=h).status_code == 200


# ── archive ─────────────────────────────────────────────────────────
def test_archive_is_one_way_and_hides_from_list(client):
    h = auth()
    diet = new_diet(client, h)

    r = client.delete(f"{API}/{diet['id']}", headers=h)
    assert r.status_code == 200
    assert r.json()["status"] == "archived"

    assert client.get(API, headers=h).json()["total"] == 0
    # still readable by id
    assert client.get(f"{API}/{diet['id']}", headers=h).json()["status"] == "archived"

    again = client.delete(f"{API}/{diet['id']}", headers=h)
    assert again.status_code == 409
    assert again.json()["error"] == "DIET_ALREADY_ARCHIVED"


# ── infrastructure failures ─────────────────────────────────────────
def test_database_outage_is_503(client):
    async def broken_session():
        raise OperationalError("SELECT 1", {}, ConnectionRefusedError("db down"))
        yield  # pragma: no cover

    app.dependency_overrides[get_session] = broken_session
    r = client.get(API, headers=auth())
    assert r.status_code == 503
    assert r.json()["error"] == "SERVICE_UNAVAILABLE"
