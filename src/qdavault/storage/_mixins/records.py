"""Entity record operations for storage mixin."""

import json
import sqlite3
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from qdavault.exceptions import StorageError
from qdavault.storage.models import EntityKind
from qdavault.utils import transaction_rollback


def encode_value(value: Any) -> Any:
    """Convert a Python value into something SQLite can bind.

    Structured values (dicts, lists) are stored as JSON text, datetimes as ISO
    strings and booleans as integers.

    Args:
        value: Field value from an importer

    Returns:
        SQLite-compatible value
    """
    if isinstance(value, dict | list):
        return json.dumps(value, default=str)
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, bool):
        return int(value)
    return value


class RecordsMixin:
    """Mixin providing create/find operations on destination entity tables.

    Every ``create`` is its own committed transaction, so a failing record
    never rolls back records imported before it.
    """

    def _get_connection(self) -> sqlite3.Connection:
        """Get database connection."""
        raise NotImplementedError("Subclass must implement _get_connection")

    def _table_columns(self, table: str) -> frozenset[str]:
        """Return the column names of a destination table."""
        raise NotImplementedError("Subclass must implement _table_columns")

    def _checked_columns(self, table: str, fields: Mapping[str, Any]) -> list[str]:
        """Validate field names against the table before building SQL.

        Raises:
            StorageError: If a field is not a column of the table
        """
        columns = self._table_columns(table)
        unknown = sorted(set(fields) - columns)
        if unknown:
            raise StorageError(f"Unknown column(s) for {table}: {', '.join(unknown)}")
        return list(fields)

    def _insert(self, table: str, fields: Mapping[str, Any]) -> int:
        names = self._checked_columns(table, fields)
        placeholders = ", ".join("?" for _ in names)
        query = f"INSERT INTO {table} ({', '.join(names)}) VALUES ({placeholders})"  # noqa: S608

        try:
            conn = self._get_connection()
            conn.execute("BEGIN IMMEDIATE")

            with transaction_rollback(conn):
                cursor = conn.execute(query, [encode_value(fields[name]) for name in names])
                conn.commit()

            row_id = cursor.lastrowid
            if row_id is None:
                raise StorageError(f"Insert into {table} returned no row ID")
            return row_id
        except sqlite3.Error as e:
            raise StorageError(f"Failed to create {table} record: {e}") from e

    def create(self, kind: EntityKind, fields: Mapping[str, Any]) -> int:
        """Create a destination record from a field map.

        Args:
            kind: Entity kind (selects the table)
            fields: Column name -> value

        Returns:
            Destination ID assigned to the new record

        Raises:
            StorageError: If the insert fails or a field is not a column
        """
        return self._insert(kind.table_name, fields)

    def find_by(self, kind: EntityKind, **criteria: Any) -> dict[str, Any] | None:
        """Find the first record (lowest ID) matching all field criteria.

        Args:
            kind: Entity kind
            **criteria: Column name -> exact value

        Returns:
            Record as a dict, or None if nothing matches
        """
        if not criteria:
            raise StorageError("find_by requires at least one criterion")

        table = kind.table_name
        names = self._checked_columns(table, criteria)
        where = " AND ".join(f"{name} = ?" for name in names)

        try:
            cursor = self._get_connection().execute(
                f"SELECT * FROM {table} WHERE {where} ORDER BY id LIMIT 1",  # noqa: S608
                [encode_value(criteria[name]) for name in names],
            )
            row = cursor.fetchone()
            return dict(row) if row else None
        except sqlite3.Error as e:
            raise StorageError(f"Failed to query {table}: {e}") from e

    def get(self, kind: EntityKind, record_id: int) -> dict[str, Any] | None:
        """Retrieve a record by destination ID.

        Args:
            kind: Entity kind
            record_id: Destination ID

        Returns:
            Record as a dict, or None if not found
        """
        return self.find_by(kind, id=record_id)

    def list_all(self, kind: EntityKind, order_by: str = "id") -> list[dict[str, Any]]:
        """List every record of a kind.

        Args:
            kind: Entity kind
            order_by: Column to sort by

        Returns:
            Records as dicts
        """
        table = kind.table_name
        if order_by not in self._table_columns(table):
            raise StorageError(f"Unknown column for {table}: {order_by}")

        try:
            cursor = self._get_connection().execute(
                f"SELECT * FROM {table} ORDER BY {order_by}, id"  # noqa: S608
            )
            return [dict(row) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise StorageError(f"Failed to list {table}: {e}") from e

    def count(self, kind: EntityKind) -> int:
        """Count records of a kind.

        Args:
            kind: Entity kind

        Returns:
            Number of records
        """
        table = kind.table_name
        try:
            cursor = self._get_connection().execute(f"SELECT COUNT(*) FROM {table}")  # noqa: S608
            return int(cursor.fetchone()[0])
        except sqlite3.Error as e:
            raise StorageError(f"Failed to count {table}: {e}") from e
