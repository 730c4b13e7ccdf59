"""Import orchestration across all entity stages."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from qdavault.restoration.backup_reader import BackupReader, ensure_bundle_exists
from qdavault.restoration.context import ImportContext
from qdavault.restoration.dependency_graph import DependencyGraph
from qdavault.restoration.identity import ResolvedIdentity
from qdavault.restoration.importers import IMPORTERS
from qdavault.restoration.statistics import ImportStatistics
from qdavault.storage.content_storage import ContentStorage
from qdavault.storage.models import EntityKind, ImportResult
from qdavault.storage.repository import RecordRepository

logger = logging.getLogger(__name__)


@dataclass
class ImportReport:
    """Outcome of a full import run.

    Attributes:
        statistics: Per-entity outcome counters
        password_reset_emails: Users created with an unusable password
        results: Per-record results, by entity kind
    """

    statistics: ImportStatistics
    password_reset_emails: list[str] = field(default_factory=list)
    results: dict[EntityKind, list[ImportResult]] = field(default_factory=dict)

    @property
    def has_failures(self) -> bool:
        return self.statistics.has_failures


class ImportOrchestrator:
    """Runs every import stage in dependency order against one bundle.

    Stages run one after another on a single thread; a stage never aborts the
    run, whatever happens to its records.

    Example:
        >>> orchestrator = ImportOrchestrator(bundle, repository, storage, identity)
        >>> report = orchestrator.run()
        >>> report.statistics.counts(EntityKind.CODE).success
        12
    """

    def __init__(
        self,
        bundle_path: str | Path,
        repository: RecordRepository,
        storage: ContentStorage,
        identity: ResolvedIdentity,
        console: Console | None = None,
        graph: DependencyGraph | None = None,
    ):
        """Initialize orchestrator.

        Args:
            bundle_path: Backup bundle directory
            repository: Destination record repository
            storage: Destination content storage
            identity: Identity policy resolved before the run
            console: Console for progress lines
            graph: Dependency graph (defaults to the built-in one)
        """
        self.bundle_path = Path(bundle_path)
        self.repository = repository
        self.storage = storage
        self.identity = identity
        self.console = console
        self.graph = graph or DependencyGraph()

    def build_context(self) -> ImportContext:
        """Fresh run state for one import."""
        context = ImportContext(
            bundle_path=self.bundle_path,
            reader=BackupReader(self.bundle_path),
            repository=self.repository,
            storage=self.storage,
            identity=self.identity,
            console=self.console,
        )
        if self.identity.reassigning and self.identity.user_id is not None:
            context.mappings.reassign_users_to(self.identity.user_id)
        return context

    def run(self) -> ImportReport:
        """Import the whole bundle.

        Returns:
            ImportReport with statistics and users needing a credential reset

        Raises:
            BundleNotFoundError: If the bundle directory does not exist
            DependencyError: If the dependency graph is inconsistent
        """
        ensure_bundle_exists(self.bundle_path)
        self.graph.validate_no_cycles()

        context = self.build_context()
        report = ImportReport(
            statistics=context.statistics,
            password_reset_emails=context.password_reset_emails,
        )

        logger.info(f"Starting import from {self.bundle_path} (identity mode: {self.identity.mode})")
        for kind in self.graph.get_import_order():
            importer = IMPORTERS[kind](context)
            report.results[kind] = importer.run()

        logger.info(f"Import finished: {context.statistics}")
        return report
