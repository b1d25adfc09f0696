from __future__ import annotations

from pipelines.runner import RunContext
from services.mapping import map_record, with_test_prefix


class MapFields:
    """Canonical record -> external field names (empty values omitted)."""

    def __init__(self, test_prefix: bool = False) -> None:
        self.test_prefix = test_prefix

    def run(self, ctx: RunContext) -> RunContext:
        fields = map_record(ctx.record, ctx.field_mappings) if ctx.record is not None else {}
        if self.test_prefix:
            fields = with_test_prefix(fields)
        ctx.fields = fields
        ctx.meta["mapped_fields"] = sorted(fields)
        return ctx
