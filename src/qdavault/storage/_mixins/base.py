"""Base database connection management for storage mixins."""

import logging
import sqlite3
from pathlib import Path

from qdavault.constants import SQLITE_BUSY_TIMEOUT_SECONDS
from qdavault.exceptions import StorageError
from qdavault.storage.schema import create_schema, optimize_database

logger = logging.getLogger(__name__)


class DatabaseConnectionMixin:
    """Mixin providing database connection management.

    This mixin provides the foundational database operations that all other
    storage mixins depend on. It handles:
    - Opening the destination SQLite database with manual transaction control
    - Schema initialization on first use
    - Column introspection used to validate field maps before they reach SQL

    Imports run on a single thread, so one connection per repository is enough.
    """

    db_path: Path
    _conn: sqlite3.Connection | None
    _columns: dict[str, frozenset[str]]

    def __init__(self, db_path: str | Path, **kwargs: object) -> None:
        """Initialize database connection management.

        Args:
            db_path: Path to SQLite database file
            **kwargs: Forwarded to parent classes for cooperative inheritance

        Raises:
            StorageError: If the database cannot be opened or initialized
        """
        super().__init__(**kwargs)
        self.db_path = Path(db_path)
        self._conn = None
        self._columns = {}

        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = self._get_connection()
            optimize_database(conn)
            create_schema(conn)
        except (sqlite3.Error, OSError) as e:
            self.close()
            raise StorageError(f"Failed to initialize database {self.db_path}: {e}") from e

    def _create_connection(self) -> sqlite3.Connection:
        """Create new SQLite connection.

        Returns:
            New SQLite connection with row access by column name
        """
        conn = sqlite3.connect(
            str(self.db_path),
            timeout=float(SQLITE_BUSY_TIMEOUT_SECONDS),
            isolation_level=None,  # Manual transaction control
        )
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = OFF")  # Imports tolerate dangling references
        return conn

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create the repository's database connection.

        Returns:
            SQLite connection
        """
        if self._conn is None:
            self._conn = self._create_connection()
        return self._conn

    def _table_columns(self, table: str) -> frozenset[str]:
        """Return the column names of a destination table.

        Args:
            table: Table name

        Returns:
            Set of column names

        Raises:
            StorageError: If the table does not exist
        """
        if table not in self._columns:
            cursor = self._get_connection().execute(f"PRAGMA table_info({table})")
            columns = frozenset(row["name"] for row in cursor.fetchall())
            if not columns:
                raise StorageError(f"Unknown table: {table}")
            self._columns[table] = columns
        return self._columns[table]

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
