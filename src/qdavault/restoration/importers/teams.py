"""Team import stage."""

from typing import Any

from qdavault.restoration.importers.base import EntityImporter
from qdavault.storage.models import EntityKind, ImportResult


class TeamImporter(EntityImporter):
    """Creates teams; an unmapped owner leaves the team without one."""

    kind = EntityKind.TEAM
    required_field = "name"

    def import_record(self, record: dict[str, Any]) -> ImportResult:
        source_id = self.validate(record)
        fields = {
            "name": record["name"],
            "personal_team": bool(record.get("personal_team") or False),
            "user_id": self.resolve(EntityKind.USER, record, "user_id"),
            **self.timestamps(record, source_id),
        }
        return self.success(source_id, self.persist(source_id, fields))
