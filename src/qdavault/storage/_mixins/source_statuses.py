"""Conversion-status marker operations for storage mixin."""

import sqlite3
from datetime import datetime
from typing import Any

from qdavault.exceptions import StorageError
from qdavault.utils import transaction_rollback


class SourceStatusesMixin:
    """Mixin providing create-or-update of source conversion-status markers.

    A marker records that a rendered form of a source's content is available
    in destination storage. There is at most one marker per source.
    """

    def _get_connection(self) -> sqlite3.Connection:
        """Get database connection."""
        raise NotImplementedError("Subclass must implement _get_connection")

    def upsert_source_status(self, source_id: int, status: str, path: str | None) -> int:
        """Create or update the conversion-status marker of a source.

        Args:
            source_id: Destination source ID
            status: Conversion status (e.g. "converted:html")
            path: Absolute path of the stored rendering

        Returns:
            ID of the marker row

        Raises:
            StorageError: If the write fails
        """
        now = datetime.now().isoformat()
        try:
            conn = self._get_connection()
            conn.execute("BEGIN IMMEDIATE")

            with transaction_rollback(conn):
                conn.execute(
                    """
                    INSERT INTO source_statuses (source_id, status, path, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    ON CONFLICT(source_id) DO UPDATE SET
                        status = excluded.status,
                        path = excluded.path,
                        updated_at = excluded.updated_at
                """,
                    (source_id, status, path, now, now),
                )
                row = conn.execute(
                    "SELECT id FROM source_statuses WHERE source_id = ?", (source_id,)
                ).fetchone()
                conn.commit()

            return int(row["id"])
        except sqlite3.Error as e:
            raise StorageError(f"Failed to save status for source {source_id}: {e}") from e

    def get_source_status(self, source_id: int) -> dict[str, Any] | None:
        """Retrieve the conversion-status marker of a source.

        Args:
            source_id: Destination source ID

        Returns:
            Marker as a dict, or None if the source has none
        """
        try:
            row = (
                self._get_connection()
                .execute("SELECT * FROM source_statuses WHERE source_id = ?", (source_id,))
                .fetchone()
            )
            return dict(row) if row else None
        except sqlite3.Error as e:
            raise StorageError(f"Failed to get status for source {source_id}: {e}") from e
