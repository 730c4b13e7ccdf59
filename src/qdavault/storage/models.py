"""Data models for backup records and import results."""

from dataclasses import dataclass
from enum import IntEnum, StrEnum

from qdavault.constants import BACKUP_FILE_SUFFIX


class EntityKind(IntEnum):
    """Enumeration of entity types carried by a backup bundle."""

    USER = 1
    TEAM = 2
    PROJECT = 3
    CODEBOOK = 4
    CODE = 5
    SOURCE = 6
    VARIABLE = 7
    SELECTION = 8
    AUDIT = 9

    @property
    def plural(self) -> str:
        """Plural lowercase name used for bundle files and table names."""
        return _PLURALS[self]

    @property
    def table_name(self) -> str:
        """Destination table holding records of this kind."""
        return self.plural

    @property
    def backup_filename(self) -> str:
        """File name of this kind's record list inside a backup bundle."""
        return f"{self.plural}{BACKUP_FILE_SUFFIX}"

    @property
    def label(self) -> str:
        """Human-readable name for console output."""
        return self.plural.capitalize()


_PLURALS: dict[EntityKind, str] = {
    EntityKind.USER: "users",
    EntityKind.TEAM: "teams",
    EntityKind.PROJECT: "projects",
    EntityKind.CODEBOOK: "codebooks",
    EntityKind.CODE: "codes",
    EntityKind.SOURCE: "sources",
    EntityKind.VARIABLE: "variables",
    EntityKind.SELECTION: "selections",
    EntityKind.AUDIT: "audits",
}


class DependencyOrder(IntEnum):
    """Defines import order based on entity dependencies.

    Lower values are imported first (e.g., USERS before PROJECTS).
    """

    USERS = 1
    TEAMS = 2
    PROJECTS = 3
    CODEBOOKS = 4
    CODES = 5
    SOURCES = 6
    VARIABLES = 7
    SELECTIONS = 8
    AUDITS = 9


class ImportOutcome(StrEnum):
    """Three-way outcome of importing a single backup record."""

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class ImportResult:
    """Result of a single record import attempt.

    Attributes:
        kind: Entity kind of the record
        outcome: SUCCESS, SKIPPED or FAILED
        source_id: Identifier from the backup (None if the record had none)
        destination_id: ID in the destination database (set on success, and on
            skips that reuse an existing record)
        message: Reason for a skip or failure

    Examples:
        >>> ImportResult(EntityKind.CODE, ImportOutcome.SUCCESS, "7", destination_id=42)

        >>> ImportResult(
        ...     EntityKind.SELECTION,
        ...     ImportOutcome.SKIPPED,
        ...     "19",
        ...     message="code_id: code 3 not found in mappings",
        ... )
    """

    kind: EntityKind
    outcome: ImportOutcome
    source_id: str | None = None
    destination_id: int | None = None
    message: str | None = None

    @property
    def succeeded(self) -> bool:
        """True when the record was created in the destination."""
        return self.outcome == ImportOutcome.SUCCESS
