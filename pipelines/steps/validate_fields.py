from __future__ import annotations

import logging

from pipelines.runner import RunContext
from services.schema_validator import validate

logger = logging.getLogger(__name__)


class ValidateFields:
    """Drop fields the remote table cannot accept; keep the reasons for the caller."""

    def run(self, ctx: RunContext) -> RunContext:
        ctx.outcome = validate(ctx.fields, ctx.schema)
        if ctx.outcome.excluded:
            logger.warning(
                "Excluded fields due to validation issues: %s",
                [e.field for e in ctx.outcome.excluded],
                extra={"step": "validate_fields", "status": "excluded"},
            )
        ctx.meta["validation_stats"] = {
            "valid": len(ctx.outcome.valid),
            "excluded": len(ctx.outcome.excluded),
        }
        return ctx
