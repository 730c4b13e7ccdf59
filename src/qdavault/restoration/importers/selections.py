"""Selection (coded text span) import stage."""

from typing import Any

from qdavault.restoration.importers.base import EntityImporter, is_present
from qdavault.storage.models import EntityKind, ImportResult


class SelectionImporter(EntityImporter):
    """Creates selections.

    A source or code reference that is present but unmapped skips the
    selection; absent references import as null. Selection mappings are
    registered so audit records can point at them.
    """

    kind = EntityKind.SELECTION

    def import_record(self, record: dict[str, Any]) -> ImportResult:
        source_id = self.validate(record)

        references = {}
        for field, kind in (("source_id", EntityKind.SOURCE), ("code_id", EntityKind.CODE)):
            references[field] = self.resolve(kind, record, field)
            if is_present(record, field) and references[field] is None:
                return self.skipped(
                    source_id,
                    f"{field}: {kind.name.lower()} {record[field]} not found in mappings",
                )

        user_id = self.resolve_creator(record, "creating_user_id", "user_id")
        fields = {
            "text": record.get("text") or "",
            "description": record.get("description"),
            "start_position": record.get("start_position") or 0,
            "end_position": record.get("end_position") or 0,
            **references,
            "project_id": self.resolve(EntityKind.PROJECT, record, "project_id"),
            "creating_user_id": user_id,
            "modifying_user_id": user_id,
            **self.timestamps(record, source_id),
        }
        return self.success(source_id, self.persist(source_id, fields))
