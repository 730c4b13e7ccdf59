"""Variable import stage."""

from typing import Any

from qdavault.constants import DEFAULT_VARIABLE_TYPE
from qdavault.restoration.importers.base import EntityImporter, is_present
from qdavault.storage.models import EntityKind, ImportResult
from qdavault.utils import parse_optional_timestamp

_VALUE_FIELDS = ("boolean_value", "integer_value", "float_value")


def first_present(record: dict[str, Any], *fields: str, default: Any = None) -> Any:
    """Value of the first field the record carries (non-null), else ``default``."""
    for field in fields:
        if is_present(record, field):
            return record[field]
    return default


class VariableImporter(EntityImporter):
    """Creates source variables.

    A ``source_id`` that is present but unmapped skips the variable (its
    source failed or was skipped); an absent one imports it unattached.
    """

    kind = EntityKind.VARIABLE
    required_field = "name"

    def import_record(self, record: dict[str, Any]) -> ImportResult:
        source_id = self.validate(record)

        variable_source_id = self.resolve(EntityKind.SOURCE, record, "source_id")
        if is_present(record, "source_id") and variable_source_id is None:
            return self.skipped(
                source_id, f"source_id: source {record['source_id']} not found in mappings"
            )

        fields = {
            "name": record["name"],
            "type_of_variable": first_present(
                record, "type", "type_of_variable", default=DEFAULT_VARIABLE_TYPE
            ),
            "description": record.get("description"),
            "text_value": first_present(record, "text_value", "string_value"),
            **{field: record.get(field) for field in _VALUE_FIELDS},
            "date_value": record.get("date_value"),
            "datetime_value": parse_optional_timestamp(
                record.get("datetime_value"), "datetime_value", source_id
            ),
            "source_id": variable_source_id,
            **self.timestamps(record, source_id),
        }
        return self.success(source_id, self.persist(source_id, fields))
