"""Project import stage."""

from typing import Any

from rich.markup import escape

from qdavault.restoration.importers.base import EntityImporter
from qdavault.storage.models import EntityKind, ImportResult


class ProjectImporter(EntityImporter):
    kind = EntityKind.PROJECT
    required_field = "name"

    def import_record(self, record: dict[str, Any]) -> ImportResult:
        source_id = self.validate(record)
        fields = {
            "name": record["name"],
            "description": record.get("description"),
            "team_id": self.resolve(EntityKind.TEAM, record, "team_id"),
            "creating_user_id": self.resolve(EntityKind.USER, record, "creating_user_id"),
            **self.timestamps(record, source_id),
        }
        destination_id = self.persist(source_id, fields)
        self.context.progress(f"  [green]✓[/green] Created project: {escape(str(record['name']))}")
        return self.success(source_id, destination_id)
