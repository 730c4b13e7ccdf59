"""Utility methods for storage mixin."""

import sqlite3

from qdavault.exceptions import StorageError
from qdavault.storage.schema import get_schema_version


class StorageUtilsMixin:
    """Mixin providing schema versioning helpers."""

    def _get_connection(self) -> sqlite3.Connection:
        """Get database connection."""
        raise NotImplementedError("Subclass must implement _get_connection")

    def get_schema_version(self) -> int:
        """Get current database schema version.

        Returns:
            Current schema version number

        Raises:
            StorageError: If schema version cannot be retrieved
        """
        conn = self._get_connection()
        version = get_schema_version(conn)
        if version is None:
            raise StorageError("Database schema version not found")
        return version
