from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient

from signlearn.db.seed import seed_catalog
from signlearn.main import app
from signlearn.models.user import User
from signlearn.repos.record_store import InMemoryRecordStore


@pytest.fixture(autouse=True)
def store() -> InMemoryRecordStore:
    """Fresh seeded store per test, installed where the app looks for it."""
    s = InMemoryRecordStore()
    asyncio.run(seed_catalog(s))
    app.state.store = s
    return s

@pytest.fixture
def client() -> TestClient:
    return TestClient(app)

@pytest.fixture
def user(store: InMemoryRecordStore) -> User:
    """A registered learner without a password (external sign-in)."""
    u = User.new(email="ada@example.com", name="Ada")
    asyncio.run(store.add_user(u))
    return u
