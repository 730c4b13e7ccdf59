"""SQLite schema creation for the destination database.

The destination mirrors the tables of the QDA application: one table per
entity kind plus ``source_statuses`` for conversion-status markers. Primary
keys are assigned by SQLite, so they never coincide with backup identifiers
except by accident.
"""

import sqlite3
from datetime import datetime

SCHEMA_VERSION = 1

_TABLES = (
    """
    CREATE TABLE IF NOT EXISTS users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        email TEXT NOT NULL UNIQUE,
        password TEXT NOT NULL,
        email_verified_at TEXT DEFAULT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS teams (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        personal_team INTEGER NOT NULL DEFAULT 0,
        user_id INTEGER REFERENCES users(id),
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS projects (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        description TEXT,
        team_id INTEGER REFERENCES teams(id),
        creating_user_id INTEGER REFERENCES users(id),
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS codebooks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        description TEXT,
        project_id INTEGER REFERENCES projects(id),
        properties TEXT,
        creating_user_id INTEGER REFERENCES users(id),
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS codes (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        description TEXT,
        color TEXT NOT NULL,
        codebook_id INTEGER REFERENCES codebooks(id),
        parent_id INTEGER REFERENCES codes(id),
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS sources (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        content TEXT,
        type TEXT NOT NULL,
        project_id INTEGER REFERENCES projects(id),
        creating_user_id INTEGER REFERENCES users(id),
        modifying_user_id INTEGER REFERENCES users(id),
        upload_path TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS source_statuses (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        source_id INTEGER NOT NULL UNIQUE REFERENCES sources(id),
        status TEXT NOT NULL,
        path TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS variables (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        type_of_variable TEXT NOT NULL,
        description TEXT,
        text_value TEXT,
        boolean_value INTEGER,
        integer_value INTEGER,
        float_value REAL,
        date_value TEXT,
        datetime_value TEXT,
        source_id INTEGER REFERENCES sources(id),
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS selections (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        text TEXT NOT NULL,
        description TEXT,
        start_position INTEGER NOT NULL DEFAULT 0,
        end_position INTEGER NOT NULL DEFAULT 0,
        source_id INTEGER REFERENCES sources(id),
        code_id INTEGER REFERENCES codes(id),
        project_id INTEGER REFERENCES projects(id),
        creating_user_id INTEGER REFERENCES users(id),
        modifying_user_id INTEGER REFERENCES users(id),
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS audits (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_type TEXT,
        user_id INTEGER,
        event TEXT NOT NULL,
        auditable_type TEXT,
        auditable_id INTEGER,
        old_values TEXT,
        new_values TEXT,
        url TEXT,
        ip_address TEXT,
        user_agent TEXT,
        tags TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
)

_INDEXES = (
    "CREATE INDEX IF NOT EXISTS idx_codes_codebook ON codes(codebook_id)",
    "CREATE INDEX IF NOT EXISTS idx_codes_parent ON codes(parent_id)",
    "CREATE INDEX IF NOT EXISTS idx_sources_project ON sources(project_id)",
    "CREATE INDEX IF NOT EXISTS idx_selections_source ON selections(source_id)",
    "CREATE INDEX IF NOT EXISTS idx_audits_auditable ON audits(auditable_type, auditable_id)",
)


def create_schema(conn: sqlite3.Connection) -> None:
    """Create destination tables and indexes if they do not exist yet.

    Args:
        conn: SQLite connection
    """
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS schema_version (
            version INTEGER PRIMARY KEY,
            applied_at TEXT NOT NULL,
            description TEXT
        )
    """)

    for statement in _TABLES:
        cursor.execute(statement)

    for statement in _INDEXES:
        cursor.execute(statement)

    cursor.execute(
        "SELECT version FROM schema_version WHERE version = ?",
        (SCHEMA_VERSION,),
    )
    if not cursor.fetchone():
        cursor.execute(
            """
            INSERT INTO schema_version (version, applied_at, description)
            VALUES (?, ?, ?)
        """,
            (SCHEMA_VERSION, datetime.now().isoformat(), "Initial destination schema"),
        )

    conn.commit()


def optimize_database(conn: sqlite3.Connection) -> None:
    """Apply SQLite settings for a write-heavy sequential import.

    Args:
        conn: SQLite connection
    """
    cursor = conn.cursor()

    cursor.execute("PRAGMA journal_mode = WAL")  # Readers keep working during import
    cursor.execute("PRAGMA synchronous = NORMAL")
    cursor.execute("PRAGMA temp_store = MEMORY")

    conn.commit()


def get_schema_version(conn: sqlite3.Connection) -> int | None:
    """Get current schema version.

    Args:
        conn: SQLite connection

    Returns:
        Current schema version or None if not initialized
    """
    cursor = conn.cursor()
    try:
        cursor.execute("SELECT version FROM schema_version ORDER BY version DESC LIMIT 1")
        result = cursor.fetchone()
        return result[0] if result else None
    except sqlite3.OperationalError:
        return None
