"""Fixed-window limiter behaviour with a controllable clock."""

import pytest

from bnusa.core.exceptions import RateLimitError
from bnusa.services.rate_limit import RATE_LIMIT_MESSAGE, FixedWindowRateLimiter


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_allows_up_to_limit_then_rejects():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(limit=3, window_seconds=60, clock=clock)

    for _ in range(3):
        limiter.hit("user-a")
    with pytest.raises(RateLimitError) as exc_info:
        limiter.hit("user-a")
    assert exc_info.value.message == RATE_LIMIT_MESSAGE
    assert exc_info.value.status_code == 429


def test_keys_are_counted_separately():
    limiter = FixedWindowRateLimiter(limit=1, window_seconds=60, clock=FakeClock())
    limiter.hit("user-a")
    limiter.hit("user-b")
    with pytest.raises(RateLimitError):
        limiter.hit("user-a")


def test_new_window_after_expiry():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(limit=1, window_seconds=60, clock=clock)
    limiter.hit("user-a")

    clock.now += 60
    with pytest.raises(RateLimitError):
        limiter.hit("user-a")

    clock.now += 1
    limiter.hit("user-a")


def test_reset_clears_all_windows():
    limiter = FixedWindowRateLimiter(limit=1, window_seconds=60, clock=FakeClock())
    limiter.hit("user-a")
    limiter.reset()
    limiter.hit("user-a")


def test_expired_windows_are_pruned():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(limit=1, window_seconds=60, clock=clock)
    limiter.hit("user-a")
    limiter.hit("user-b")
    assert len(limiter) == 2

    clock.now += 61
    limiter.hit("user-c")
    assert len(limiter) == 1
