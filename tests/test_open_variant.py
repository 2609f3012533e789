"""
tests/test_open_variant.py -- The service running with AUTH_ENABLED=false.

Without auth, /people is public, records carry no owner, and the auth routes
do not exist.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


def test_people_needs_no_cookie(open_client: TestClient) -> None:
    resp = open_client.get("/people")
    assert resp.status_code == 200
    assert isinstance(resp.json(), list)


def test_full_crud_cycle_without_owner(open_client: TestClient) -> None:
    created = open_client.post("/people", json={"name": "Ann", "image": "ann.jpg", "title": "CEO"}).json()
    assert created["username"] is None

    person_id = created["id"]
    assert person_id in {p["id"] for p in open_client.get("/people").json()}

    updated = open_client.put(f"/people/{person_id}", json={"title": "Chair"}).json()
    assert updated["title"] == "Chair"
    assert updated["image"] == "ann.jpg"

    removed = open_client.delete(f"/people/{person_id}")
    assert removed.status_code == 200
    assert removed.json()["name"] == "Ann"
    assert open_client.get(f"/people/{person_id}").json() is None


def test_records_are_globally_visible(open_client: TestClient) -> None:
    person_id = open_client.post("/people", json={"name": "Shared"}).json()["id"]
    open_client.cookies.set("token", "whatever")
    assert open_client.get(f"/people/{person_id}").json()["name"] == "Shared"
    open_client.cookies.clear()


@pytest.mark.parametrize(
    "method,path",
    [("POST", "/signup"), ("POST", "/login"), ("GET", "/logout"), ("GET", "/cookietest")],
)
def test_auth_routes_are_disabled(open_client: TestClient, method: str, path: str) -> None:
    resp = open_client.request(method, path, json={"username": "u", "password": "p"} if method == "POST" else None)
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "not_found"


def test_root_still_says_hello(open_client: TestClient) -> None:
    assert open_client.get("/").json() == {"hello": "world"}
