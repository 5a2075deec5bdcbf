"""Every error path renders the ``{message, error?}`` envelope."""

from __future__ import annotations

import uuid

import pytest
from fastapi.testclient import TestClient

from signlearn.core.errors import StoreError
from signlearn.main import app
from signlearn.repos.record_store import InMemoryRecordStore


def test_domain_error_envelope(client: TestClient) -> None:
    resp = client.get("/courses/no-such-course")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Course not found"}


def test_validation_error_names_field(client: TestClient) -> None:
    resp = client.post("/auth/register", json={"name": "Bo", "email": 3})
    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "Validation error"
    assert body["error"].startswith("email:")


def test_unknown_route_uses_envelope(client: TestClient) -> None:
    resp = client.get("/no/such/route")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Not Found"}


def test_store_error_is_500_with_detail(
    client: TestClient, store: InMemoryRecordStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def broken(user_id):
        raise StoreError("Store unavailable", detail="connection refused")

    monkeypatch.setattr(store, "get_user", broken)
    resp = client.get(f"/users/{uuid.uuid4()}")
    assert resp.status_code == 500
    assert resp.json() == {
        "message": "Store unavailable",
        "error": "connection refused",
    }


def test_unhandled_error_is_500(
    store: InMemoryRecordStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def broken(user_id):
        raise RuntimeError("boom")

    monkeypatch.setattr(store, "get_user", broken)
    resp = TestClient(app, raise_server_exceptions=False).get(
        f"/users/{uuid.uuid4()}"
    )
    assert resp.status_code == 500
    assert resp.json()["message"] == "Internal server error"
