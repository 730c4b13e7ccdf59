"""Per-entity outcome counters for an import run."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from qdavault.storage.models import EntityKind, ImportOutcome, ImportResult


@dataclass
class EntityCounts:
    """Success/skipped/failed counters for one entity kind."""

    success: int = 0
    skipped: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.success + self.skipped + self.failed


@dataclass
class ImportStatistics:
    """Accumulates import outcomes per entity kind.

    The import runs on one thread, so no locking is needed.

    Example:
        >>> stats = ImportStatistics()
        >>> stats.record(EntityKind.CODE, ImportOutcome.SUCCESS)
        >>> stats.counts(EntityKind.CODE).success
        1
    """

    by_kind: dict[EntityKind, EntityCounts] = field(
        default_factory=lambda: {kind: EntityCounts() for kind in EntityKind}
    )
    start_time: datetime = field(default_factory=datetime.now)

    def record(self, kind: EntityKind, outcome: ImportOutcome) -> None:
        """Count one outcome for an entity kind."""
        counts = self.by_kind[kind]
        if outcome == ImportOutcome.SUCCESS:
            counts.success += 1
        elif outcome == ImportOutcome.SKIPPED:
            counts.skipped += 1
        else:
            counts.failed += 1

    def add(self, result: ImportResult) -> None:
        """Count the outcome of a per-record import result."""
        self.record(result.kind, result.outcome)

    def counts(self, kind: EntityKind) -> EntityCounts:
        return self.by_kind[kind]

    @property
    def total_success(self) -> int:
        return sum(c.success for c in self.by_kind.values())

    @property
    def total_skipped(self) -> int:
        return sum(c.skipped for c in self.by_kind.values())

    @property
    def total_failed(self) -> int:
        return sum(c.failed for c in self.by_kind.values())

    @property
    def has_failures(self) -> bool:
        return self.total_failed > 0

    def snapshot(self) -> dict[str, Any]:
        """Plain-dict view of the counters (JSON friendly).

        Returns:
            Dictionary with keys:
                - by_kind: {plural name: {success, skipped, failed}} for kinds with records
                - success / skipped / failed: totals
                - duration_seconds: Elapsed time since the run started
        """
        return {
            "by_kind": {
                kind.plural: {
                    "success": counts.success,
                    "skipped": counts.skipped,
                    "failed": counts.failed,
                }
                for kind, counts in self.by_kind.items()
                if counts.total > 0
            },
            "success": self.total_success,
            "skipped": self.total_skipped,
            "failed": self.total_failed,
            "duration_seconds": (datetime.now() - self.start_time).total_seconds(),
        }

    def __str__(self) -> str:
        return (
            f"ImportStatistics(success={self.total_success}, "
            f"skipped={self.total_skipped}, failed={self.total_failed})"
        )
