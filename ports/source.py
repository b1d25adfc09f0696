from __future__ import annotations

from typing import Protocol


class DocumentSourcePort(Protocol):
    """Live view of the profile page; every snapshot reflects its current state."""

    def current_url(self) -> str:
        ...

    def snapshot(self) -> str:
        ...
