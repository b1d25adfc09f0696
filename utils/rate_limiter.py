from __future__ import annotations

import time
from collections import deque
from typing import Callable, Deque


class SlidingWindowRateLimiter:
    """Allow at most ``max_requests`` within any ``window_seconds`` span."""

    def __init__(self, max_requests: int = 3, window_seconds: float = 5.0, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self.requests: Deque[float] = deque()

    def _prune(self, now: float) -> None:
        while self.requests and now - self.requests[0] >= self.window_seconds:
            self.requests.popleft()

    def can_proceed(self) -> bool:
        """Record and allow a request, or refuse it when the window is full."""
        now = self.clock()
        self._prune(now)
        if len(self.requests) >= self.max_requests:
            return False
        self.requests.append(now)
        return True

    def wait_time(self) -> float:
        """Seconds until the oldest request leaves the window (0 when there is room)."""
        now = self.clock()
        self._prune(now)
        if len(self.requests) < self.max_requests:
            return 0.0
        return max(0.0, self.window_seconds - (now - self.requests[0]))
