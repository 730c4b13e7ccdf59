"""Storage mixins for modular repository implementation."""

from qdavault.storage._mixins.base import DatabaseConnectionMixin
from qdavault.storage._mixins.records import RecordsMixin
from qdavault.storage._mixins.source_statuses import SourceStatusesMixin
from qdavault.storage._mixins.utils import StorageUtilsMixin

__all__ = [
    "DatabaseConnectionMixin",
    "RecordsMixin",
    "SourceStatusesMixin",
    "StorageUtilsMixin",
]
