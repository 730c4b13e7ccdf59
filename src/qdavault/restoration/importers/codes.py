"""Code import stage (two-pass parent resolution)."""

import logging
from collections.abc import Iterable
from typing import Any

from qdavault.constants import DEFAULT_CODE_COLOR
from qdavault.restoration.importers.base import EntityImporter, is_blank
from qdavault.storage.models import EntityKind, ImportResult

logger = logging.getLogger(__name__)


def has_parent(record: Any) -> bool:
    """True when a code record names a parent code (0 and "" mean none)."""
    if not isinstance(record, dict):
        return False
    parent_id = record.get("parent_id")
    return not (is_blank(parent_id) or parent_id in (0, "0"))


class CodeImporter(EntityImporter):
    """Creates codes in two passes.

    Pass 1 creates codes without a parent so their mappings exist; pass 2
    creates the rest, resolving ``parent_id`` through the mapping table. This
    handles a child listed before its parent as long as the parent is itself
    parentless. A parent that never gets mapped (missing from the file,
    failed, or part of a cycle) leaves the code without a parent.

    An explicitly supplied ``codebook_id`` that cannot be mapped fails the
    code.
    """

    kind = EntityKind.CODE
    required_field = "name"

    def import_records(self, records: Iterable[Any]) -> list[ImportResult]:
        records = list(records)
        roots = [record for record in records if not has_parent(record)]
        children = [record for record in records if has_parent(record)]

        logger.debug(f"Code pass 1: {len(roots)} parentless, pass 2: {len(children)} with parent")
        results = super().import_records(roots)
        results.extend(super().import_records(children))
        return results

    def import_record(self, record: dict[str, Any]) -> ImportResult:
        source_id = self.validate(record)
        codebook_id = self.resolve_required(EntityKind.CODEBOOK, record, "codebook_id")

        parent_id = None
        if has_parent(record):
            parent_id = self.resolve(EntityKind.CODE, record, "parent_id")
            if parent_id is None:
                logger.warning(
                    f"Code {source_id}: parent {record['parent_id']} not found in mappings, "
                    "importing without parent"
                )

        color = record.get("color")
        fields = {
            "name": record["name"],
            "description": record.get("description"),
            "color": DEFAULT_CODE_COLOR if is_blank(color) else color,
            "codebook_id": codebook_id,
            "parent_id": parent_id,
            **self.timestamps(record, source_id),
        }
        return self.success(source_id, self.persist(source_id, fields))
