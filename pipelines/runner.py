from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from models.profile_record import ProfileRecord
from models.remote_schema import RemoteSchema
from models.sync_results import ValidationOutcome
from utils.logging_setup import init_logging

logger = logging.getLogger(__name__)


@dataclass
class RunContext:
    record: Optional[ProfileRecord] = None
    field_mappings: Dict[str, str] = field(default_factory=dict)
    # None means the remote schema is unknown; steps must not filter on it
    schema: Optional[RemoteSchema] = None
    fields: Dict[str, Any] = field(default_factory=dict)
    outcome: ValidationOutcome = field(default_factory=ValidationOutcome)
    meta: dict = field(default_factory=dict)


class Step(Protocol):
    def run(self, ctx: RunContext) -> RunContext:
        ...


class Pipeline:
    def __init__(self, steps: List[Step]):
        self.steps = steps

    def run(self, ctx: RunContext) -> RunContext:
        # Make logging idempotent for any direct runner use
        init_logging()
        for step in self.steps:
            name = type(step).__name__
            started = time.monotonic()
            ctx = step.run(ctx)
            logger.debug(
                "%s: %d field(s)", name, len(ctx.fields),
                extra={"step": name, "status": "ok", "duration_ms": int((time.monotonic() - started) * 1000)},
            )
        return ctx
