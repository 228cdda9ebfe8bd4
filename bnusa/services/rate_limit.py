"""
Fixed-window request throttle.

State lives in this process only. With several API workers each one keeps its
own counters, so the effective limit is per worker.
"""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from bnusa.core.config import settings
from bnusa.core.exceptions import RateLimitError

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again shortly."


@dataclass
class _Window:
    count: int
    reset_at: float


class FixedWindowRateLimiter:
    """Allow `limit` hits per key every `window_seconds`.

    A window starts with the first hit after the previous one expired. Expired
    windows of other keys are swept at most once per window length.
    """

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._next_sweep: float | None = None
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._windows)

    def _sweep(self, now: float) -> None:
        if self._next_sweep is not None and now < self._next_sweep:
            return
        self._windows = {
            key: window
            for key, window in self._windows.items()
            if now <= window.reset_at
        }
        self._next_sweep = now + self.window_seconds

    def hit(self, key: str) -> None:
        """Count one request for `key`; raise RateLimitError over the limit."""
        now = self._clock()
        with self._lock:
            self._sweep(now)
            window = self._windows.get(key)
            if window is None or now > window.reset_at:
                self._windows[key] = _Window(count=1, reset_at=now + self.window_seconds)
                return
            window.count += 1
            count = window.count

        if count > self.limit:
            logger.warning("Rate limit exceeded for %s (%d requests)", key, count)
            raise RateLimitError(RATE_LIMIT_MESSAGE)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
            self._next_sweep = None


book_update_limiter = FixedWindowRateLimiter(
    limit=settings.BOOK_UPDATE_RATE_LIMIT,
    window_seconds=settings.BOOK_UPDATE_RATE_WINDOW_SECONDS,
)
