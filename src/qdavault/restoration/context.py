"""Run state shared by every importer stage."""

from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from qdavault.restoration.backup_reader import BackupReader
from qdavault.restoration.id_mapper import IDMappingTable
from qdavault.restoration.identity import ResolvedIdentity
from qdavault.restoration.statistics import ImportStatistics
from qdavault.storage.content_storage import ContentStorage
from qdavault.storage.repository import RecordRepository


@dataclass
class ImportContext:
    """Everything one import run reads and accumulates.

    Created fresh per run and discarded at the end; nothing here is persisted
    except through the repository and content storage.

    Attributes:
        bundle_path: Backup bundle directory
        reader: Loader for the bundle's entity files
        repository: Destination record repository
        storage: Destination content storage
        identity: Identity policy settled before the run
        mappings: Source ID -> destination ID table built during the run
        statistics: Per-entity outcome counters
        password_reset_emails: Emails of users created with an unusable password
        console: Console for progress lines (None keeps the run silent)
    """

    bundle_path: Path
    reader: BackupReader
    repository: RecordRepository
    storage: ContentStorage
    identity: ResolvedIdentity
    mappings: IDMappingTable = field(default_factory=IDMappingTable)
    statistics: ImportStatistics = field(default_factory=ImportStatistics)
    password_reset_emails: list[str] = field(default_factory=list)
    console: Console | None = None

    @property
    def current_user_id(self) -> int | None:
        """Destination user used as creator fallback (None when importing originals)."""
        return self.identity.user_id

    def progress(self, message: str) -> None:
        """Print a progress line if a console is attached."""
        if self.console is not None:
            self.console.print(message, highlight=False)
