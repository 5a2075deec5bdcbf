"""X-Request-ID handling and request-scoped log tagging."""

from __future__ import annotations

import logging
import uuid

from fastapi.testclient import TestClient


def test_generates_uuid_when_header_absent(client: TestClient) -> None:
    resp = client.get("/courses")
    uuid.UUID(resp.headers["x-request-id"])


def test_echoes_client_request_id(client: TestClient) -> None:
    resp = client.get("/courses", headers={"X-Request-ID": "mobile-7f3a"})
    assert resp.headers["x-request-id"] == "mobile-7f3a"


def test_error_responses_carry_request_id(client: TestClient) -> None:
    resp = client.get("/courses/does-not-exist")
    assert resp.status_code == 404
    assert resp.headers.get("x-request-id")


def test_oversized_client_request_id_replaced(client: TestClient) -> None:
    resp = client.get("/health", headers={"X-Request-ID": "x" * 500})
    req_id = resp.headers["x-request-id"]
    assert req_id != "x" * 500
    uuid.UUID(req_id)


def test_request_id_reaches_domain_logs(client: TestClient, caplog) -> None:
    caplog.set_level(logging.INFO, logger="signlearn.services.catalog_service")
    client.get("/courses/school-day", headers={"X-Request-ID": "trace-42"})

    records = [
        r for r in caplog.records if r.name == "signlearn.services.catalog_service"
    ]
    assert records
    assert all(r.request_id == "trace-42" for r in records)
