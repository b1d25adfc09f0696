from __future__ import annotations

from typing import Any, Dict, Protocol


class NotifierPort(Protocol):
    """Receives push messages (``profileDataExtracted`` / ``profileExtractionError``)."""

    def __call__(self, message: Dict[str, Any]) -> None:
        ...
