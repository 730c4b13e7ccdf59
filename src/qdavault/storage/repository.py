"""Destination record repository."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

from qdavault.storage._mixins import (
    DatabaseConnectionMixin,
    RecordsMixin,
    SourceStatusesMixin,
    StorageUtilsMixin,
)
from qdavault.storage.models import EntityKind

logger = logging.getLogger(__name__)


class RecordRepository(Protocol):
    """Protocol for destination record persistence used by the importers."""

    def create(self, kind: EntityKind, fields: Mapping[str, Any]) -> int:
        """Create a record from a field map.

        Args:
            kind: Entity kind
            fields: Column name -> value

        Returns:
            Destination ID of the new record

        Raises:
            StorageError: If the insert fails
        """
        ...

    def find_by(self, kind: EntityKind, **criteria: Any) -> dict[str, Any] | None:
        """Find the first record matching all criteria.

        Args:
            kind: Entity kind
            **criteria: Column name -> exact value

        Returns:
            Record dict or None
        """
        ...

    def get(self, kind: EntityKind, record_id: int) -> dict[str, Any] | None:
        """Retrieve a record by destination ID."""
        ...

    def list_all(self, kind: EntityKind, order_by: str = "id") -> list[dict[str, Any]]:
        """List every record of a kind, sorted by a column."""
        ...

    def upsert_source_status(self, source_id: int, status: str, path: str | None) -> int:
        """Create or update the conversion-status marker of a source."""
        ...

    def close(self) -> None:
        """Release the underlying connection."""
        ...


class SQLiteRecordRepository(
    DatabaseConnectionMixin,
    RecordsMixin,
    SourceStatusesMixin,
    StorageUtilsMixin,
):
    """SQLite-based destination repository.

    Examples:
        >>> repo = SQLiteRecordRepository("qdavault.db")
        >>> user_id = repo.create(EntityKind.USER, {"name": "Ada", "email": "ada@example.com", ...})
        >>> repo.find_by(EntityKind.USER, email="ada@example.com")["id"] == user_id
        True
    """

    def __init__(self, db_path: str | Path):
        """Initialize repository with database path.

        Args:
            db_path: Path to SQLite database file
        """
        super().__init__(db_path=db_path)
        logger.debug(f"Opened destination database {self.db_path}")

    def __enter__(self) -> SQLiteRecordRepository:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
