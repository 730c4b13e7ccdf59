"""Remapping of polymorphic audit subjects."""

import logging

from qdavault.exceptions import UnresolvedReferenceError
from qdavault.restoration.id_mapper import IDMappingTable
from qdavault.storage.models import EntityKind

logger = logging.getLogger(__name__)

# Checked in order: "Codebook" must match before "Code"
AUDIT_SUBJECT_KINDS: tuple[tuple[str, EntityKind], ...] = (
    ("Codebook", EntityKind.CODEBOOK),
    ("Code", EntityKind.CODE),
    ("Selection", EntityKind.SELECTION),
    ("Source", EntityKind.SOURCE),
    ("Variable", EntityKind.VARIABLE),
    ("Project", EntityKind.PROJECT),
    ("Team", EntityKind.TEAM),
    ("User", EntityKind.USER),
)


def subject_kind(subject_type: str) -> EntityKind | None:
    """Entity kind named by an audit subject type such as ``App\\Models\\Codebook``.

    Example:
        >>> subject_kind("App\\\\Models\\\\Codebook")
        <EntityKind.CODEBOOK: 4>
    """
    for type_name, kind in AUDIT_SUBJECT_KINDS:
        if type_name in subject_type:
            return kind
    return None


class AuditSubjectRemapper:
    """Translates an audit record's subject (type tag + source ID) to a destination ID."""

    def __init__(self, mappings: IDMappingTable):
        self.mappings = mappings

    def remap(self, subject_type: object, subject_id: object) -> int | None:
        """Destination ID of an audit subject.

        Args:
            subject_type: Recorded subject type name
            subject_id: Recorded subject source ID

        Returns:
            Destination ID, or None if the audit has no subject

        Raises:
            UnresolvedReferenceError: If the type is unknown or the ID is unmapped
        """
        if subject_type is None or subject_id is None:
            return None

        kind = subject_kind(str(subject_type))
        if kind is None:
            raise UnresolvedReferenceError("auditable_type", str(subject_type), subject_id)

        destination_id = self.mappings.resolve(kind, subject_id)
        if destination_id is None:
            raise UnresolvedReferenceError("auditable_id", kind.name, subject_id)
        return destination_id
