from __future__ import annotations

from typing import Mapping, Optional

from models.profile_record import ProfileRecord
from models.remote_schema import RemoteSchema
from pipelines.runner import Pipeline, RunContext
from pipelines.steps import MapFields, TransformFields, ValidateFields


def build_write_pipeline() -> Pipeline:
    return Pipeline([MapFields(), TransformFields(), ValidateFields()])


def prepare_fields(
    record: ProfileRecord,
    field_mappings: Optional[Mapping[str, str]],
    schema: Optional[RemoteSchema],
) -> RunContext:
    """Map, coerce and validate one record against ``schema`` (None = unknown)."""
    ctx = RunContext(record=record, field_mappings=dict(field_mappings or {}), schema=schema)
    return build_write_pipeline().run(ctx)
