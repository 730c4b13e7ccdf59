"""Source import stage."""

import logging
from typing import Any

from rich.markup import escape

from qdavault.constants import DEFAULT_SOURCE_TYPE
from qdavault.restoration.context import ImportContext
from qdavault.restoration.importers.base import EntityImporter, is_blank
from qdavault.restoration.source_content import SourceContentRecovery
from qdavault.storage.models import EntityKind, ImportResult

logger = logging.getLogger(__name__)


class SourceImporter(EntityImporter):
    """Creates sources and re-attaches their converted content when available.

    Content recovery is best effort: if it fails the source still counts as
    imported.
    """

    kind = EntityKind.SOURCE
    required_field = "name"

    def __init__(self, context: ImportContext, recovery: SourceContentRecovery | None = None):
        super().__init__(context)
        self.recovery = recovery or SourceContentRecovery(
            context.bundle_path, context.storage, context.repository
        )

    def import_record(self, record: dict[str, Any]) -> ImportResult:
        source_id = self.validate(record)
        project_id = self.resolve(EntityKind.PROJECT, record, "project_id")
        user_id = self.resolve_creator(record, "user_id")

        source_type = record.get("type")
        fields = {
            "name": record["name"],
            "content": record.get("content"),
            "type": DEFAULT_SOURCE_TYPE if is_blank(source_type) else source_type,
            "project_id": project_id,
            "creating_user_id": user_id,
            "modifying_user_id": user_id,
            "upload_path": record.get("upload_path"),
            **self.timestamps(record, source_id),
        }
        destination_id = self.persist(source_id, fields)
        self.context.progress(f"  [green]✓[/green] Created source: {escape(str(record['name']))}")

        self._recover_content(record, destination_id, project_id)
        return self.success(source_id, destination_id)

    def _recover_content(
        self, record: dict[str, Any], destination_id: int, project_id: int | None
    ) -> None:
        try:
            stored = self.recovery.recover(record, destination_id, project_id)
        except Exception as e:
            logger.warning(f"Failed to recover converted content for source {destination_id}: {e}")
            return

        if stored is not None:
            self.context.progress("    + Imported HTML content")
