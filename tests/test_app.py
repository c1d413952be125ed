"""Tests for system endpoints, rate limiting and storage selection."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from facenotes.database import build_storage
from facenotes.main import create_app
from facenotes.ratelimit import RateLimiter
from facenotes.storage import MemoryStorage


def test_health_reports_storage(client: TestClient) -> None:
    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database"] == "Mock Database"
    assert body["stats"] == {"users": 0, "notes": 0}


def test_test_endpoint(client: TestClient) -> None:
    response = client.get("/api/test")

    assert response.status_code == 200
    assert response.json()["status"] == "OK"


def test_rate_limit_returns_429() -> None:
    app = create_app(storage=MemoryStorage(), rate_limiter=RateLimiter(2, 60))
    with TestClient(app) as client:
        assert client.get("/api/test").status_code == 200
        assert client.get("/api/test").status_code == 200
        response = client.get("/api/test")

    assert response.status_code == 429
    assert response.json()["success"] is False
    assert response.json()["retryAfter"] > 0


def test_rate_limiter_window_slides() -> None:
    now = [0.0]
    limiter = RateLimiter(1, 10, clock=lambda: now[0])

    assert limiter.hit("1.2.3.4") == (True, 0.0)
    allowed, retry_after = limiter.hit("1.2.3.4")
    assert not allowed
    assert retry_after == pytest.approx(10)
    assert limiter.hit("5.6.7.8")[0]

    now[0] = 10.0
    assert limiter.hit("1.2.3.4")[0]


def test_disabled_rate_limiter_always_allows() -> None:
    limiter = RateLimiter(0, 60)

    assert all(limiter.hit("ip")[0] for _ in range(500))


def test_build_storage_memory_with_seed() -> None:
    storage = build_storage("memory", seed=True)

    assert isinstance(storage, MemoryStorage)
    assert storage.stats()["users"] == 1


def test_build_storage_rejects_unknown_backend() -> None:
    with pytest.raises(ValueError):
        build_storage("redis")


def test_rate_limiter_forgets_idle_clients() -> None:
    now = [0.0]
    limiter = RateLimiter(5, 1, clock=lambda: now[0])
    for i in range(1000):
        limiter.hit(f"10.0.{i // 256}.{i % 256}")
    assert limiter.tracked_clients == 1000

    now[0] = 1000.0
    limiter.hit("192.168.0.1")

    assert limiter.tracked_clients == 1


def test_unknown_route_uses_error_shape(client: TestClient) -> None:
    response = client.get("/api/nope")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Not Found"}


def test_wrong_method_uses_error_shape(client: TestClient) -> None:
    response = client.delete("/api/test")

    assert response.status_code == 405
    assert response.json() == {"success": False, "message": "Method Not Allowed"}
