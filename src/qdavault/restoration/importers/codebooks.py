"""Codebook import stage."""

from typing import Any

from qdavault.restoration.importers.base import EntityImporter
from qdavault.storage.models import EntityKind, ImportResult


class CodebookImporter(EntityImporter):
    """Creates codebooks.

    The creator falls back from ``creating_user_id`` to ``user_id`` to the
    run's current identity.
    """

    kind = EntityKind.CODEBOOK
    required_field = "name"

    def import_record(self, record: dict[str, Any]) -> ImportResult:
        source_id = self.validate(record)
        fields = {
            "name": record["name"],
            "description": record.get("description"),
            "project_id": self.resolve(EntityKind.PROJECT, record, "project_id"),
            "properties": record.get("properties"),
            "creating_user_id": self.resolve_creator(record, "creating_user_id", "user_id"),
            **self.timestamps(record, source_id),
        }
        return self.success(source_id, self.persist(source_id, fields))
