"""Shared per-record import loop for entity importers."""

import logging
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any, ClassVar

from qdavault.exceptions import (
    MappingConflictError,
    QdaVaultError,
    RecordValidationError,
    UnresolvedReferenceError,
)
from qdavault.restoration.context import ImportContext
from qdavault.restoration.id_mapper import IDMappingTable, normalize_source_id
from qdavault.storage.models import EntityKind, ImportOutcome, ImportResult
from qdavault.storage.repository import RecordRepository
from qdavault.utils import describe_record, parse_timestamp

logger = logging.getLogger(__name__)


def is_present(record: Mapping[str, Any], field: str) -> bool:
    """True when a record carries a non-null value for a field."""
    return record.get(field) is not None


def is_blank(value: Any) -> bool:
    """True for null, empty and whitespace-only values."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


class EntityImporter:
    """Base class for one import stage.

    Subclasses set ``kind`` (and ``required_field`` if the record must carry
    one) and implement ``import_record``, which returns an ImportResult or
    raises. The loop in ``import_records`` isolates every record: an exception
    from one record is logged with the record's context, counted as failed,
    and the loop moves on.
    """

    kind: ClassVar[EntityKind]
    required_field: ClassVar[str | None] = None

    def __init__(self, context: ImportContext):
        """Initialize importer.

        Args:
            context: Shared run state
        """
        self.context = context

    @property
    def mappings(self) -> IDMappingTable:
        return self.context.mappings

    @property
    def repository(self) -> RecordRepository:
        return self.context.repository

    @property
    def entity_name(self) -> str:
        return self.kind.name.lower()

    def run(self) -> list[ImportResult]:
        """Load this stage's records from the bundle and import them all.

        Returns:
            One ImportResult per record, in processing order
        """
        self.context.progress(f"[bold]Importing {self.kind.plural}...[/bold]")
        results = self.import_records(self.context.reader.load(self.kind))

        counts = self.context.statistics.counts(self.kind)
        logger.info(
            f"{self.kind.label}: {counts.success} success, "
            f"{counts.skipped} skipped, {counts.failed} failed"
        )
        return results

    def import_records(self, records: Iterable[Any]) -> list[ImportResult]:
        """Import records one at a time and count every outcome.

        Args:
            records: Decoded backup records

        Returns:
            One ImportResult per record
        """
        results = []
        for record in records:
            result = self._safe_import(record)
            self.context.statistics.add(result)
            results.append(result)
        return results

    def import_record(self, record: dict[str, Any]) -> ImportResult:
        """Import one record. Subclasses must implement.

        Raises:
            QdaVaultError: For validation, reference or storage problems
        """
        raise NotImplementedError("Subclass must implement import_record")

    def _safe_import(self, record: Any) -> ImportResult:
        source_id = self.source_id_of(record)
        try:
            if not isinstance(record, dict):
                raise RecordValidationError(
                    f"Expected an object, got {type(record).__name__}"
                )
            return self.import_record(record)
        except QdaVaultError as e:
            logger.error(
                f"Failed to import {self.entity_name} {source_id}: {e} | "
                f"record={describe_record(record)}"
            )
            return self.failed(source_id, str(e))
        except Exception as e:
            logger.exception(
                f"Unexpected error importing {self.entity_name} {source_id}: {e} | "
                f"record={describe_record(record)}"
            )
            return self.failed(source_id, f"{type(e).__name__}: {e}")

    # Outcomes

    def success(self, source_id: str | None, destination_id: int) -> ImportResult:
        return ImportResult(self.kind, ImportOutcome.SUCCESS, source_id, destination_id)

    def skipped(
        self, source_id: str | None, message: str, destination_id: int | None = None
    ) -> ImportResult:
        logger.info(f"Skipped {self.entity_name} {source_id}: {message}")
        return ImportResult(
            self.kind, ImportOutcome.SKIPPED, source_id, destination_id, message=message
        )

    def failed(self, source_id: str | None, message: str) -> ImportResult:
        return ImportResult(self.kind, ImportOutcome.FAILED, source_id, message=message)

    # Record helpers

    @staticmethod
    def source_id_of(record: Any) -> str | None:
        """Normalized source ID of a record, or None if it has none."""
        if not isinstance(record, dict) or record.get("id") is None:
            return None
        return normalize_source_id(record["id"])

    def validate(self, record: dict[str, Any]) -> str | None:
        """Check the required field and that the source ID is not already imported.

        Returns:
            Normalized source ID

        Raises:
            RecordValidationError: If the required field is missing or blank
            MappingConflictError: If the source ID was already imported this run
        """
        if self.required_field and is_blank(record.get(self.required_field)):
            raise RecordValidationError(
                f"{self.kind.name.capitalize()} missing {self.required_field}"
            )

        source_id = self.source_id_of(record)
        if source_id is not None and self.mappings.contains(self.kind, source_id):
            raise MappingConflictError(
                self.kind.name, source_id, self.mappings.resolve(self.kind, source_id)
            )
        return source_id

    def resolve(self, kind: EntityKind, record: dict[str, Any], field: str) -> int | None:
        """Destination ID for a reference field, or None if absent or unmapped."""
        return self.mappings.resolve(kind, record.get(field))

    def resolve_required(
        self, kind: EntityKind, record: dict[str, Any], field: str
    ) -> int | None:
        """Destination ID for a reference field that must map when present.

        Returns:
            Destination ID, or None when the field is absent

        Raises:
            UnresolvedReferenceError: If the field is present but unmapped
        """
        if not is_present(record, field):
            return None

        destination_id = self.mappings.resolve(kind, record[field])
        if destination_id is None:
            raise UnresolvedReferenceError(field, kind.name, record[field])
        return destination_id

    def resolve_creator(self, record: dict[str, Any], *fields: str) -> int | None:
        """Mapped user of the first field the record carries, else the current identity.

        Only the first present field is consulted: an unmapped
        ``creating_user_id`` does not fall through to ``user_id``.
        """
        for field in fields:
            if is_present(record, field):
                user_id = self.resolve(EntityKind.USER, record, field)
                if user_id is not None:
                    return user_id
                break
        return self.context.current_user_id

    @staticmethod
    def timestamps(record: dict[str, Any], source_id: str | None) -> dict[str, datetime]:
        """created_at / updated_at from the record, falling back to now."""
        now = datetime.now(UTC)
        return {
            "created_at": parse_timestamp(record.get("created_at"), "created_at", source_id, now),
            "updated_at": parse_timestamp(record.get("updated_at"), "updated_at", source_id, now),
        }

    def persist(self, source_id: str | None, fields: dict[str, Any]) -> int:
        """Create the destination record and register its mapping.

        Args:
            source_id: Normalized source ID (None skips mapping registration)
            fields: Destination column -> value

        Returns:
            Destination ID
        """
        destination_id = self.repository.create(self.kind, fields)
        if source_id is not None:
            self.mappings.record(self.kind, source_id, destination_id)
        logger.debug(f"Created {self.entity_name} {destination_id} from source {source_id}")
        return destination_id
