from __future__ import annotations

import pytest

from utils.rate_limiter import SlidingWindowRateLimiter
from utils.scheduler import SystemScheduler


class Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_allows_three_per_window_then_waits():
    clock = Clock()
    limiter = SlidingWindowRateLimiter(3, 5.0, clock=clock)
    assert [limiter.can_proceed() for _ in range(4)] == [True, True, True, False]
    clock.now = 2.0
    assert limiter.wait_time() == pytest.approx(3.0)
    clock.now = 5.0
    assert limiter.wait_time() == 0.0
    assert limiter.can_proceed() is True


def test_window_slides_per_request():
    clock = Clock()
    limiter = SlidingWindowRateLimiter(2, 10.0, clock=clock)
    limiter.can_proceed()
    clock.now = 4.0
    limiter.can_proceed()
    clock.now = 10.0
    assert limiter.can_proceed() is True
    assert limiter.can_proceed() is False
    assert limiter.wait_time() == pytest.approx(4.0)


def test_refused_requests_are_not_recorded():
    clock = Clock()
    limiter = SlidingWindowRateLimiter(1, 1.0, clock=clock)
    limiter.can_proceed()
    for _ in range(5):
        limiter.can_proceed()
    assert len(limiter.requests) == 1


def test_system_scheduler_runs_callbacks_in_order():
    scheduler = SystemScheduler()
    seen = []
    scheduler.call_later(0.02, lambda: seen.append("late"))
    scheduler.call_later(0, lambda: scheduler.call_later(0, lambda: seen.append("chained")))
    scheduler.call_later(-1, lambda: seen.append("now"))
    assert scheduler.pending() == 3
    scheduler.run()
    assert seen == ["now", "chained", "late"]
    assert scheduler.pending() == 0
