"""Tests for package listing and detail endpoints."""

from __future__ import annotations

import asyncio

from fastapi.testclient import TestClient

from signlearn.models.course import Package
from signlearn.repos.record_store import InMemoryRecordStore


def test_list_packages(client: TestClient) -> None:
    resp = client.get("/packages")
    assert resp.status_code == 200
    body = resp.json()
    assert body["pagination"]["total"] == 3
    # Popular packages sort first.
    assert [p["popular"] for p in body["packages"]] == [True, True, False]


def test_list_packages_filters(client: TestClient) -> None:
    resp = client.get("/packages", params={"targetAudience": "parents"})
    assert [p["id"] for p in resp.json()["packages"]] == ["little-hands"]

    resp = client.get("/packages", params={"ageGroup": "15+"})
    assert [p["id"] for p in resp.json()["packages"]] == ["fluent-communicator"]

    resp = client.get("/packages", params={"popular": "true"})
    assert {p["id"] for p in resp.json()["packages"]} == {
        "little-hands",
        "fluent-communicator",
    }


def test_list_packages_search_matches_features(client: TestClient) -> None:
    resp = client.get("/packages", params={"search": "flashcards"})
    assert [p["id"] for p in resp.json()["packages"]] == ["little-hands"]


def test_inactive_package_hidden_everywhere(
    client: TestClient, store: InMemoryRecordStore
) -> None:
    retired = Package.new(id="retired", title="Old", is_active=False)
    asyncio.run(store.add_package(retired))

    ids = {p["id"] for p in client.get("/packages").json()["packages"]}
    assert "retired" not in ids
    assert client.get("/packages/retired").status_code == 404


def test_get_package_counts_views(client: TestClient) -> None:
    client.get("/packages/young-explorers")
    resp = client.get("/packages/young-explorers")
    assert resp.status_code == 200
    body = resp.json()
    assert body["analytics"]["views"] == 2
    assert body["courseIds"] == ["numbers-1-20", "school-day"]
    assert body["ageGroups"] == ["5-10"]


def test_get_package_not_found(client: TestClient) -> None:
    resp = client.get("/packages/nope")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Package not found"


def test_popular_packages_default_limit(client: TestClient) -> None:
    resp = client.get("/packages/popular")
    assert resp.status_code == 200
    assert len(resp.json()) == 3
