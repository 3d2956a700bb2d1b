"""
Rate Limiter - Fixed-window request counting per client key.

The clock is injected so windows can be driven deterministically in tests.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

__all__ = ["RateLimiter"]


@dataclass
class _Window:
    count: int
    reset_at: float


class RateLimiter:
    """
    Per-key fixed-window rate limiter.

    A key's window opens on its first request and lasts ``window_seconds``.
    Expired windows are swept at most once per window length.

    Example:
        >>> limiter = RateLimiter(max_requests=10, window_seconds=60)
        >>> limiter.check("10.0.0.1")
        True
    """

    def __init__(
        self,
        max_requests: int = 60,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._next_sweep: float | None = None

    def __len__(self) -> int:
        """Number of keys currently tracked."""
        return len(self._windows)

    def check(self, key: str) -> bool:
        """Record a request for ``key``; False if it exceeds the limit."""
        now = self._clock()
        if self._next_sweep is None or now >= self._next_sweep:
            self._sweep(now)

        window = self._windows.get(key)
        if window is None or now > window.reset_at:
            self._windows[key] = _Window(count=1, reset_at=now + self.window_seconds)
            return True

        if window.count >= self.max_requests:
            return False

        window.count += 1
        return True

    def _sweep(self, now: float) -> None:
        expired = [key for key, window in self._windows.items() if now > window.reset_at]
        for key in expired:
            del self._windows[key]
        self._next_sweep = now + self.window_seconds

    def remaining(self, key: str) -> int:
        """Requests left in the current window for ``key``."""
        window = self._windows.get(key)
        if window is None or self._clock() > window.reset_at:
            return self.max_requests
        return max(self.max_requests - window.count, 0)

    def retry_after(self, key: str) -> float:
        """Seconds until ``key``'s window resets (0 if no open window)."""
        window = self._windows.get(key)
        if window is None:
            return 0.0
        return max(window.reset_at - self._clock(), 0.0)

    def reset(self) -> None:
        """Forget every window."""
        self._windows.clear()
        self._next_sweep = None
