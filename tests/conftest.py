"""Shared fixtures for the API and storage tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from facenotes.main import create_app
from facenotes.ratelimit import RateLimiter
from facenotes.storage import MemoryStorage


def descriptor(value: float = 0.0, dim: int = 128) -> list[float]:
    return [value] * dim


@pytest.fixture
def storage() -> MemoryStorage:
    store = MemoryStorage()
    yield store
    store.reset()


@pytest.fixture
def client(storage: MemoryStorage) -> TestClient:
    app = create_app(storage=storage, rate_limiter=RateLimiter(0, 60))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client: TestClient) -> dict[str, str]:
    client.post("/api/users/register", json={"name": "Alice", "faceDescriptor": descriptor(0.2)})
    response = client.post("/api/users/authenticate", json={"faceDescriptor": descriptor(0.2)})
    token = response.json()["accessToken"]
    return {"Authorization": f"Bearer {token}"}
