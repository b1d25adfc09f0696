from __future__ import annotations

from pipelines.runner import RunContext
from services.type_transformer import transform_fields


class TransformFields:
    def run(self, ctx: RunContext) -> RunContext:
        field_types = ctx.schema.field_types if ctx.schema is not None else None
        ctx.fields = transform_fields(ctx.fields, field_types)
        return ctx
