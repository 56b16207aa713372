"""Tests for the per-address login token bucket."""

import pytest

from weblist.services.rate_limiter import RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return RateLimiter(rate=5.0, burst=5, ttl_seconds=600, clock=clock)


def test_burst_then_deny(limiter):
    assert all(limiter.allow("1.2.3.4") for _ in range(5))
    assert not limiter.allow("1.2.3.4")


def test_keys_are_independent(limiter):
    for _ in range(5):
        limiter.allow("a")
    assert not limiter.allow("a")
    assert limiter.allow("b")


def test_refills_over_time(limiter, clock):
    for _ in range(5):
        limiter.allow("a")
    assert not limiter.allow("a")
    clock.now += 0.2  # one token at 5/s
    assert limiter.allow("a")
    assert not limiter.allow("a")


def test_refill_is_capped_at_burst(limiter, clock):
    limiter.allow("a")
    clock.now += 100
    assert sum(limiter.allow("a") for _ in range(10)) == 5


def test_expired_buckets_are_dropped(limiter, clock):
    limiter.allow("a")
    limiter.allow("b")
    assert len(limiter) == 2
    clock.now += 601
    limiter.allow("c")
    assert len(limiter) == 1


def test_independent_named_limiters(clock):
    login = RateLimiter(rate=5.0, burst=1, clock=clock)
    requests = RateLimiter(rate=50.0, burst=1, clock=clock, name="requests")
    assert login.name == "login"
    assert login.allow("a") and requests.allow("a")
    assert not login.allow("a")
    assert not requests.allow("a")
