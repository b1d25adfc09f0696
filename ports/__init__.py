from .notifier import NotifierPort
from .repos import SchemaStorePort
from .scheduler import SchedulerPort
from .source import DocumentSourcePort

__all__ = [
    "NotifierPort",
    "SchemaStorePort",
    "SchedulerPort",
    "DocumentSourcePort",
]
