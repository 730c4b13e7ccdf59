"""Storage module for destination records and content files."""

from qdavault.storage.content_storage import ContentStorage
from qdavault.storage.models import (
    DependencyOrder,
    EntityKind,
    ImportOutcome,
    ImportResult,
)
from qdavault.storage.repository import RecordRepository, SQLiteRecordRepository

__all__ = [
    "ContentStorage",
    "DependencyOrder",
    "EntityKind",
    "ImportOutcome",
    "ImportResult",
    "RecordRepository",
    "SQLiteRecordRepository",
]
