from .field_types import FieldType
from .profile_record import ProfileRecord
from .remote_schema import RemoteSchema, TableIdentity
from .sync_config import SyncConfig
from .sync_results import (
    ErrorInfo,
    ErrorKind,
    ExcludedField,
    FieldError,
    SyncResponse,
    ValidationOutcome,
)

__all__ = [
    "FieldType",
    "ProfileRecord",
    "RemoteSchema",
    "TableIdentity",
    "SyncConfig",
    "ErrorInfo",
    "ErrorKind",
    "ExcludedField",
    "FieldError",
    "SyncResponse",
    "ValidationOutcome",
]
