"""Tests for the per-address request throttle."""

import pytest
from httpx import ASGITransport, AsyncClient

from weblist.main import create_app


def _client(settings):
    return AsyncClient(transport=ASGITransport(app=create_app(settings)), base_url="http://test")


@pytest.mark.asyncio
async def test_burst_exhausted_returns_429(make_settings):
    settings = make_settings(request_rate_per_second=0.001, request_burst=2)
    async with _client(settings) as c:
        assert (await c.get("/api/ping")).status_code == 200
        assert (await c.get("/api/list")).status_code == 200
        resp = await c.get("/api/ping")
        assert resp.status_code == 429
        assert resp.headers["X-Content-Type-Options"] == "nosniff"


@pytest.mark.asyncio
async def test_throttle_runs_before_auth(make_settings):
    settings = make_settings(
        auth="pw", session_secret="s", request_rate_per_second=0.001, request_burst=1,
    )
    async with _client(settings) as c:
        assert (await c.get("/")).status_code == 303
        assert (await c.get("/")).status_code == 429


@pytest.mark.asyncio
async def test_zero_rate_disables_throttle(make_settings):
    settings = make_settings(request_rate_per_second=0)
    app = create_app(settings)
    assert app.state.services.request_limiter is None
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        for _ in range(60):
            assert (await c.get("/api/ping")).status_code == 200


def test_default_limiter_allows_fifty(make_settings):
    limiter = create_app(make_settings()).state.services.request_limiter
    assert limiter.name == "requests"
    assert all(limiter.allow("10.0.0.1") for _ in range(50))
    assert not limiter.allow("10.0.0.1")
