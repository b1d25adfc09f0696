from __future__ import annotations

import sched
import time
from typing import Any, Callable


class SystemScheduler:
    """Cooperative single-thread scheduler on top of :mod:`sched`.

    ``call_later`` only queues work; nothing runs until :meth:`run` drains
    the queue, so every callback executes on the caller's thread.
    """

    def __init__(self) -> None:
        self._queue = sched.scheduler(time.monotonic, time.sleep)

    def monotonic(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)

    def call_later(self, delay: float, callback: Callable[[], Any]) -> None:
        self._queue.enter(max(0.0, delay), 0, callback)

    def pending(self) -> int:
        return len(self._queue.queue)

    def run(self) -> None:
        """Run queued callbacks (including ones they schedule) until the queue is empty."""
        self._queue.run()
