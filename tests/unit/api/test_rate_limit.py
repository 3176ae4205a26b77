"""
Unit tests for the per-client sliding window rate limiter.
"""

import pytest

from chat_relay.api.rate_limit import SlidingWindowRateLimiter


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def test_allows_up_to_quota(clock):
    limiter = SlidingWindowRateLimiter(max_requests=3, time_window=60, clock=clock)

    results = [limiter.hit("1.2.3.4")[0] for _ in range(4)]

    assert results == [True, True, True, False]


def test_retry_after_points_at_oldest_request(clock):
    limiter = SlidingWindowRateLimiter(max_requests=2, time_window=60, clock=clock)
    limiter.hit("a")
    clock.now += 10
    limiter.hit("a")
    clock.now += 5

    allowed, retry_after = limiter.hit("a")

    assert not allowed
    assert retry_after == pytest.approx(45.0)


def test_window_slides(clock):
    limiter = SlidingWindowRateLimiter(max_requests=1, time_window=60, clock=clock)

    assert limiter.hit("a")[0]
    clock.now += 59
    assert not limiter.hit("a")[0]
    clock.now += 1
    assert limiter.hit("a")[0]


def test_keys_are_independent(clock):
    limiter = SlidingWindowRateLimiter(max_requests=1, time_window=60, clock=clock)

    assert limiter.hit("a")[0]
    assert limiter.hit("b")[0]
    assert not limiter.hit("a")[0]


def test_rejected_requests_do_not_extend_window(clock):
    limiter = SlidingWindowRateLimiter(max_requests=1, time_window=60, clock=clock)
    limiter.hit("a")
    for _ in range(5):
        clock.now += 10
        limiter.hit("a")

    clock.now += 10  # 60s after the only accepted request
    assert limiter.hit("a")[0]


def test_stale_keys_are_purged(clock, monkeypatch):
    monkeypatch.setattr("chat_relay.api.rate_limit.MAX_TRACKED_KEYS", 3)
    limiter = SlidingWindowRateLimiter(max_requests=1, time_window=60, clock=clock)
    for key in ("a", "b", "c"):
        limiter.hit(key)

    clock.now += 61
    limiter.hit("d")

    assert set(limiter._hits) == {"d"}


@pytest.mark.parametrize("kwargs", [{"max_requests": 0}, {"time_window": 0}])
def test_invalid_limits(kwargs):
    with pytest.raises(ValueError):
        SlidingWindowRateLimiter(**kwargs)
