from __future__ import annotations

from fastapi.testclient import TestClient

from signlearn.core.errors import StoreError
from signlearn.main import app
from signlearn.repos.record_store import InMemoryRecordStore


class _DownStore(InMemoryRecordStore):
    async def ping(self) -> None:
        raise StoreError("Database unavailable", detail="connection refused")


def test_health_ok(client: TestClient) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "checks": {"store": "ok"}}


def test_ready_ok(client: TestClient) -> None:
    assert client.get("/ready").status_code == 200


def test_health_degraded_when_store_down(client: TestClient) -> None:
    app.state.store = _DownStore()
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "degraded"
    assert resp.json()["checks"]["store"] == "degraded"


def test_ready_unavailable_when_store_down(client: TestClient) -> None:
    app.state.store = _DownStore()
    assert client.get("/ready").status_code == 503
