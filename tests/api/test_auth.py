"""Tests for /auth/register and /auth/login."""

from __future__ import annotations

from fastapi.testclient import TestClient
from prometheus_client import REGISTRY


def _register(client: TestClient, **overrides):
    payload = {
        "name": "Grace",
        "email": "grace@example.com",
        "password": "correct horse",
        "ageGroup": "15+",
    }
    payload.update(overrides)
    return client.post("/auth/register", json=payload)


def _sample(name: str, labels: dict) -> float:
    value = REGISTRY.get_sample_value(name, labels=labels)
    return value if value is not None else 0.0


# ---- register ----


def test_register_returns_user_without_hash(client: TestClient) -> None:
    resp = _register(client)
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Registration successful"
    user = body["user"]
    assert user["email"] == "grace@example.com"
    assert user["ageGroup"] == "15+"
    assert user["userType"] == "learner"
    assert user["enrolledPackages"] == []
    assert user["progress"] == {"totalCoursesCompleted": 0}
    assert "password" not in resp.text
    assert "passwordHash" not in user


def test_register_normalizes_email(client: TestClient) -> None:
    resp = _register(client, email="  Grace@Example.COM ")
    assert resp.json()["user"]["email"] == "grace@example.com"


def test_register_duplicate_email(client: TestClient) -> None:
    _register(client)
    resp = _register(client, email="GRACE@example.com")
    assert resp.status_code == 409
    assert resp.json()["message"] == "User already exists with this email"


def test_register_rejects_short_password(client: TestClient) -> None:
    resp = _register(client, password="short")
    assert resp.status_code == 400
    assert resp.json()["message"] == "Password must be at least 8 characters"


def test_register_rejects_bad_email(client: TestClient) -> None:
    resp = _register(client, email="not-an-email")
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid email address"


def test_register_rejects_unknown_age_group(client: TestClient) -> None:
    resp = _register(client, ageGroup="11-14")
    assert resp.status_code == 400


def test_register_missing_field(client: TestClient) -> None:
    resp = client.post("/auth/register", json={"email": "x@example.com"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Validation error"


# ---- login ----


def test_login_success(client: TestClient) -> None:
    _register(client)
    before = _sample("login_attempts_total", {"result": "success"})

    resp = client.post(
        "/auth/login",
        json={"email": "grace@example.com", "password": "correct horse"},
    )
    assert resp.status_code == 200
    assert resp.json()["message"] == "Login successful"
    assert resp.json()["user"]["name"] == "Grace"
    assert _sample("login_attempts_total", {"result": "success"}) - before == 1


def test_login_wrong_password(client: TestClient) -> None:
    _register(client)
    resp = client.post(
        "/auth/login", json={"email": "grace@example.com", "password": "wrong pass"}
    )
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid email or password"


def test_login_unknown_email_same_error(client: TestClient) -> None:
    resp = client.post(
        "/auth/login", json={"email": "nobody@example.com", "password": "whatever1"}
    )
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid email or password"


def test_login_requires_both_fields(client: TestClient) -> None:
    resp = client.post("/auth/login", json={"email": "grace@example.com"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Email and password are required"
