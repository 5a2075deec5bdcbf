"""Tests for the progress endpoints and their completion side effects."""

from __future__ import annotations

import asyncio
import uuid

from fastapi.testclient import TestClient

from signlearn.models.user import User
from signlearn.repos.record_store import InMemoryRecordStore


def _post(client: TestClient, user_id, course_id: str, pct: float, spent: float = 0):
    return client.post(
        f"/users/{user_id}/progress/{course_id}",
        json={"progressPercentage": pct, "timeSpent": spent},
    )


def test_first_update_creates_record(client: TestClient, user: User) -> None:
    resp = _post(client, user.id, "alphabet-basics", 50, 120)
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Progress updated successfully"
    assert body["justCompleted"] is False
    assert body["partial"] is False
    progress = body["progress"]
    assert progress["progressPercentage"] == 50
    assert progress["timeSpent"] == 120
    assert progress["status"] == "in_progress"
    assert progress["completedAt"] is None


def test_completion_counted_once(
    client: TestClient, store: InMemoryRecordStore, user: User
) -> None:
    _post(client, user.id, "alphabet-basics", 50, 120)

    resp = _post(client, user.id, "alphabet-basics", 100, 30)
    body = resp.json()
    assert body["justCompleted"] is True
    assert body["progress"]["status"] == "completed"
    assert body["progress"]["timeSpent"] == 150
    assert body["progress"]["completedAt"] is not None

    again = _post(client, user.id, "alphabet-basics", 100, 0).json()
    assert again["justCompleted"] is False
    assert again["progress"]["completedAt"] == body["progress"]["completedAt"]

    profile = client.get(f"/users/{user.id}").json()
    assert profile["progress"]["totalCoursesCompleted"] == 1
    course = asyncio.run(store.get_course("alphabet-basics"))
    assert course is not None
    assert course.analytics.completions == 1


def test_completed_status_does_not_regress(client: TestClient, user: User) -> None:
    _post(client, user.id, "family-signs", 100)
    body = _post(client, user.id, "family-signs", 40).json()
    assert body["progress"]["status"] == "completed"
    assert body["progress"]["progressPercentage"] == 40
    assert body["justCompleted"] is False


def test_get_progress(client: TestClient, user: User) -> None:
    _post(client, user.id, "school-day", 10, 5)
    resp = client.get(f"/users/{user.id}/progress/school-day")
    assert resp.status_code == 200
    assert resp.json()["timeSpent"] == 5
    assert resp.json()["status"] == "in_progress"


def test_get_progress_not_found(client: TestClient, user: User) -> None:
    resp = client.get(f"/users/{user.id}/progress/school-day")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Progress not found"


def test_zero_percent_is_not_started(client: TestClient, user: User) -> None:
    body = _post(client, user.id, "school-day", 0, 15).json()
    assert body["progress"]["status"] == "not_started"
    assert body["progress"]["timeSpent"] == 15


def test_out_of_range_percentage_rejected(client: TestClient, user: User) -> None:
    resp = _post(client, user.id, "school-day", 101)
    assert resp.status_code == 400
    assert resp.json()["message"] == "progressPercentage must be between 0 and 100"
    assert client.get(f"/users/{user.id}/progress/school-day").status_code == 404


def test_negative_time_rejected(client: TestClient, user: User) -> None:
    resp = _post(client, user.id, "school-day", 20, -1)
    assert resp.status_code == 400
    assert resp.json()["message"] == "timeSpent must not be negative"


def test_completion_for_unknown_user_is_partial(client: TestClient) -> None:
    ghost = uuid.uuid4()
    resp = _post(client, ghost, "alphabet-basics", 100)
    assert resp.status_code == 200
    body = resp.json()
    assert body["justCompleted"] is True
    assert body["partial"] is True
    assert body["warnings"] == ["user_completions: user not found"]
    # Primary write is kept.
    assert client.get(f"/users/{ghost}/progress/alphabet-basics").status_code == 200


def test_completion_for_unknown_course_is_partial(
    client: TestClient, user: User
) -> None:
    body = _post(client, user.id, "retired-course", 100).json()
    assert body["partial"] is True
    assert body["warnings"] == ["course_completions: course not found"]
    profile = client.get(f"/users/{user.id}").json()
    assert profile["progress"]["totalCoursesCompleted"] == 1


def test_fractional_values_accepted(client: TestClient, user: User) -> None:
    resp = client.post(
        f"/users/{user.id}/progress/alphabet-basics",
        json={"progressPercentage": 33.5, "timeSpent": 2.5},
    )
    assert resp.status_code == 200
    progress = resp.json()["progress"]
    assert progress["progressPercentage"] == 33.5
    assert progress["timeSpent"] == 2.5
    assert progress["status"] == "in_progress"

    body = _post(client, user.id, "alphabet-basics", 99.9).json()
    assert body["progress"]["status"] == "in_progress"
    assert body["justCompleted"] is False


def test_malformed_user_id_is_not_found(client: TestClient) -> None:
    resp = _post(client, "abc123", "alphabet-basics", 50)
    assert resp.status_code == 404
    assert resp.json()["message"] == "User not found"
    assert client.get("/users/abc123/progress/alphabet-basics").status_code == 404
