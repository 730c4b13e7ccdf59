"""Audit history import stage."""

import logging
from typing import Any

from qdavault.constants import DEFAULT_AUDIT_EVENT, DEFAULT_AUDIT_USER_TYPE
from qdavault.restoration.audit_remapper import AuditSubjectRemapper
from qdavault.restoration.context import ImportContext
from qdavault.restoration.importers.base import EntityImporter, is_blank
from qdavault.storage.models import EntityKind, ImportOutcome, ImportResult

logger = logging.getLogger(__name__)

_PASSTHROUGH_FIELDS = ("old_values", "new_values", "url", "ip_address", "user_agent", "tags")


class AuditImporter(EntityImporter):
    """Imports audit history on a best-effort basis.

    Any problem with an audit record (unmappable subject or user, bad data,
    storage error) skips that record with a debug log only.
    """

    kind = EntityKind.AUDIT

    def __init__(self, context: ImportContext):
        super().__init__(context)
        self.remapper = AuditSubjectRemapper(context.mappings)

    def _safe_import(self, record: Any) -> ImportResult:
        source_id = self.source_id_of(record)
        try:
            if not isinstance(record, dict):
                raise TypeError(f"Expected an object, got {type(record).__name__}")
            return self.import_record(record)
        except Exception as e:
            subject = record.get("auditable_type") if isinstance(record, dict) else None
            logger.debug(f"Audit {source_id} skipped (subject: {subject}): {e}")
            return ImportResult(self.kind, ImportOutcome.SKIPPED, source_id, message=str(e))

    def import_record(self, record: dict[str, Any]) -> ImportResult:
        source_id = self.validate(record)

        event = record.get("event")
        user_type = record.get("user_type")
        fields = {
            "user_type": DEFAULT_AUDIT_USER_TYPE if is_blank(user_type) else user_type,
            "user_id": self.resolve_required(EntityKind.USER, record, "user_id"),
            "event": DEFAULT_AUDIT_EVENT if is_blank(event) else event,
            "auditable_type": record.get("auditable_type"),
            "auditable_id": self.remapper.remap(
                record.get("auditable_type"), record.get("auditable_id")
            ),
            **{field: record.get(field) for field in _PASSTHROUGH_FIELDS},
            **self.timestamps(record, source_id),
        }
        return self.success(source_id, self.persist(source_id, fields))
