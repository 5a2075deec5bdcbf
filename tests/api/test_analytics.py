from __future__ import annotations

import asyncio

from fastapi.testclient import TestClient

from signlearn.models.user import User
from signlearn.repos.record_store import InMemoryRecordStore


def test_dashboard_counts(
    client: TestClient, store: InMemoryRecordStore, user: User
) -> None:
    asyncio.run(store.add_user(User.new(email="second@example.com")))
    resp = client.get("/analytics/dashboard")
    assert resp.status_code == 200
    body = resp.json()
    assert body["stats"] == {"totalCourses": 6, "totalPackages": 3, "totalUsers": 2}
    assert len(body["popularCourses"]) == 5
    assert len(body["popularPackages"]) == 3


def test_dashboard_reflects_enrollments(client: TestClient, user: User) -> None:
    client.post(f"/users/{user.id}/enroll/young-explorers")
    body = client.get("/analytics/dashboard").json()
    assert body["popularPackages"][0]["id"] == "young-explorers"
    top_courses = {c["id"] for c in body["popularCourses"][:2]}
    assert top_courses == {"numbers-1-20", "school-day"}
