from __future__ import annotations

from typing import Any, Callable, Protocol


class SchedulerPort(Protocol):
    def monotonic(self) -> float:
        ...

    def sleep(self, seconds: float) -> None:
        ...

    def call_later(self, delay: float, callback: Callable[[], Any]) -> None:
        ...
