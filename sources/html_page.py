from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass
class StaticPage:
    """A fixed HTML snapshot (implements ``DocumentSourcePort``)."""

    url: str
    html: str

    def current_url(self) -> str:
        return self.url

    def snapshot(self) -> str:
        return self.html


@dataclass
class HtmlFilePage:
    """Saved profile page on disk; re-read on every snapshot so edits show up between polls."""

    path: Path
    url: str

    def current_url(self) -> str:
        return self.url

    def snapshot(self) -> str:
        return Path(self.path).read_text(encoding="utf-8")
