"""Tests for the sliding window rate limiter and its middleware buckets."""
from types import SimpleNamespace

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.api.middleware.rate_limit import RateLimitMiddleware, SlidingWindowCounter, client_ip


class TestSlidingWindowCounter:
    def test_blocks_over_limit(self):
        counter = SlidingWindowCounter()
        for _ in range(3):
            counter.is_allowed("client1", limit=3, window_seconds=60)
        allowed, retry_after, remaining = counter.is_allowed("client1", limit=3, window_seconds=60)
        assert allowed is False
        assert retry_after >= 1
        assert remaining == 0

    def test_separate_keys(self):
        counter = SlidingWindowCounter()
        counter.is_allowed("ip-a", limit=1, window_seconds=60)
        assert counter.is_allowed("ip-a", limit=1, window_seconds=60)[0] is False
        assert counter.is_allowed("ip-b", limit=1, window_seconds=60)[0] is True

    def test_remaining_count(self):
        counter = SlidingWindowCounter()
        assert counter.is_allowed("rem-key", limit=5, window_seconds=60)[2] == 4
        assert counter.is_allowed("rem-key", limit=5, window_seconds=60)[2] == 3

    def test_reset(self):
        counter = SlidingWindowCounter()
        counter.is_allowed("k", limit=1, window_seconds=60)
        counter.reset()
        assert counter.is_allowed("k", limit=1, window_seconds=60)[0] is True


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestSlidingWindowExpiry:
    def test_sweep_drops_idle_clients(self):
        clock = FakeClock()
        counter = SlidingWindowCounter(clock=clock)
        for i in range(500):
            counter.is_allowed(f"ip-{i}", limit=5, window_seconds=10)
        assert len(counter) == 500

        clock.now += 11
        assert counter.sweep() == 500
        assert len(counter) == 0

    def test_sweep_keeps_active_clients(self):
        clock = FakeClock()
        counter = SlidingWindowCounter(clock=clock)
        counter.is_allowed("idle", limit=5, window_seconds=10)
        clock.now += 8
        counter.is_allowed("active", limit=5, window_seconds=10)
        counter.is_allowed("long", limit=5, window_seconds=300)
        clock.now += 5
        counter.sweep()
        assert len(counter) == 2
        assert counter.is_allowed("active", limit=2, window_seconds=10)[2] == 0

    def test_distinct_ips_do_not_accumulate(self):
        clock = FakeClock()
        counter = SlidingWindowCounter(clock=clock)
        for i in range(1000):
            clock.now += 1
            counter.is_allowed(f"ip-{i}", limit=5, window_seconds=10)
        # every SWEEP_INTERVAL_SECONDS the keys idle for a full window are purged
        assert len(counter) <= 70

    def test_blocked_key_still_expires(self):
        clock = FakeClock()
        counter = SlidingWindowCounter(clock=clock)
        counter.is_allowed("k", limit=1, window_seconds=10)
        assert counter.is_allowed("k", limit=1, window_seconds=10)[0] is False
        clock.now += 10.5
        assert counter.is_allowed("k", limit=1, window_seconds=10)[0] is True


def _request(host: str, forwarded: str | None = None):
    headers = {"x-forwarded-for": forwarded} if forwarded else {}
    return SimpleNamespace(client=SimpleNamespace(host=host), headers=headers)


class TestClientIp:
    def test_direct(self):
        assert client_ip(_request("203.0.113.9")) == "203.0.113.9"

    def test_forwarded_from_trusted_proxy(self):
        assert client_ip(_request("10.0.0.2", "198.51.100.7, 10.0.0.2")) == "198.51.100.7"

    def test_forwarded_from_untrusted_peer_is_ignored(self):
        assert client_ip(_request("203.0.113.9", "198.51.100.7")) == "203.0.113.9"


@pytest.fixture
def app():
    _app = FastAPI()

    @_app.post("/api/subscriptions")
    async def _subscribe():
        return {"ok": True}

    @_app.get("/api/health")
    async def _health():
        return {"status": "healthy"}

    @_app.get("/")
    async def _page():
        return {}

    _app.add_middleware(RateLimitMiddleware)
    return _app


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


class TestRateLimitMiddleware:
    @pytest.mark.asyncio
    async def test_subscription_bucket_is_strict(self, client):
        for _ in range(5):
            assert (await client.post("/api/subscriptions")).status_code == 200
        resp = await client.post("/api/subscriptions")
        assert resp.status_code == 429
        assert resp.json() == {"detail": "Rate limit exceeded"}
        assert int(resp.headers["Retry-After"]) >= 1
        assert resp.headers["X-RateLimit-Remaining"] == "0"

    @pytest.mark.asyncio
    async def test_other_paths_use_global_bucket(self, client):
        resp = await client.get("/")
        assert resp.status_code == 200
        assert resp.headers["X-RateLimit-Limit"] == "300"

    @pytest.mark.asyncio
    async def test_health_is_exempt(self, client):
        resp = await client.get("/api/health")
        assert resp.status_code == 200
        assert "X-RateLimit-Limit" not in resp.headers


class TestRateLimitDependency:
    @pytest.mark.asyncio
    async def test_endpoint_limit(self):
        from src.api.dependencies.rate_limit import rate_limit

        _app = FastAPI()

        @_app.get("/limited", dependencies=[rate_limit(limit=2, window_seconds=60, key_prefix="t")])
        async def _limited():
            return {}

        async with AsyncClient(transport=ASGITransport(app=_app), base_url="http://test") as c:
            assert (await c.get("/limited")).status_code == 200
            assert (await c.get("/limited")).status_code == 200
            resp = await c.get("/limited")
        assert resp.status_code == 429
        assert "Retry-After" in resp.headers
