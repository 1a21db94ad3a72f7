# ==============================================================================
# RATE LIMITER TESTS
# ==============================================================================

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from storefront.core.settings import settings
from storefront.middleware.rate_limiter import RateLimitMiddleware, TokenBucket


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestTokenBucket:

    def test_spends_until_empty(self):
        bucket = TokenBucket(capacity=3, window_seconds=60, clock=FakeClock())

        results = [bucket.take("a") for _ in range(4)]

        assert [allowed for allowed, _, _ in results] == [True, True, True, False]
        assert [remaining for _, remaining, _ in results[:3]] == [2, 1, 0]
        assert results[3][2] == 20

    def test_refills_over_time(self):
        clock = FakeClock()
        bucket = TokenBucket(capacity=2, window_seconds=10, clock=clock)
        bucket.take("a")
        bucket.take("a")
        assert bucket.take("a")[0] is False

        clock.now += 6
        assert bucket.take("a")[0] is True

    def test_never_exceeds_capacity(self):
        clock = FakeClock()
        bucket = TokenBucket(capacity=2, window_seconds=10, clock=clock)
        bucket.take("a")

        clock.now += 3600
        assert bucket.take("a") == (True, 1, 0)

    def test_clients_are_independent(self):
        bucket = TokenBucket(capacity=1, window_seconds=60, clock=FakeClock())

        assert bucket.take("a")[0] is True
        assert bucket.take("a")[0] is False
        assert bucket.take("b")[0] is True


class TestMiddleware:

    @pytest.fixture
    def limited_app(self, monkeypatch):
        monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", True)
        app = FastAPI()
        app.add_middleware(RateLimitMiddleware, requests_limit=2, window_seconds=60)

        @app.get("/api/ping")
        async def ping():
            return {"pong": True}

        @app.get("/health")
        async def health():
            return {"status": "healthy"}

        return app

    @pytest.mark.asyncio
    async def test_rejects_with_envelope(self, limited_app):
        transport = ASGITransport(app=limited_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            first = await client.get("/api/ping")
            await client.get("/api/ping")
            blocked = await client.get("/api/ping")

        assert first.headers["X-RateLimit-Limit"] == "2"
        assert first.headers["X-RateLimit-Remaining"] == "1"
        assert blocked.status_code == 429
        assert blocked.json()["code"] == "RATE_LIMIT_EXCEEDED"
        assert int(blocked.headers["Retry-After"]) >= 1

    @pytest.mark.asyncio
    async def test_health_is_exempt(self, limited_app):
        transport = ASGITransport(app=limited_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            for _ in range(5):
                response = await client.get("/health")
                assert response.status_code == 200
