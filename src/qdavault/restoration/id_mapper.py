"""Run-scoped source ID -> destination ID mapping table."""

import logging
from collections import defaultdict

from qdavault.exceptions import MappingConflictError
from qdavault.storage.models import EntityKind

logger = logging.getLogger(__name__)


def normalize_source_id(source_id: object) -> str:
    """Normalize a backup identifier so 7 and "7" address the same entry."""
    return str(source_id).strip()


class IDMappingTable:
    """In-memory map from (entity kind, source ID) to destination ID.

    Entries are write-once: recording a source ID twice raises
    MappingConflictError. The table lives for one import run only.

    When user reassignment is active, every source user ID resolves to the
    single reassignment target without any user entry being recorded.

    Example:
        >>> mappings = IDMappingTable()
        >>> mappings.record(EntityKind.CODEBOOK, 12, 3)
        >>> mappings.resolve(EntityKind.CODEBOOK, "12")
        3
        >>> mappings.resolve(EntityKind.CODEBOOK, 99) is None
        True
    """

    def __init__(self) -> None:
        self._mappings: dict[EntityKind, dict[str, int]] = defaultdict(dict)
        self._reassigned_user_id: int | None = None

    @property
    def reassigned_user_id(self) -> int | None:
        """Destination user every source user resolves to, if reassignment is active."""
        return self._reassigned_user_id

    def reassign_users_to(self, user_id: int) -> None:
        """Resolve every source user ID to one destination user from now on."""
        self._reassigned_user_id = user_id
        logger.info(f"All source users will resolve to destination user {user_id}")

    def record(self, kind: EntityKind, source_id: object, destination_id: int) -> None:
        """Register the destination ID created for a source record.

        Args:
            kind: Entity kind
            source_id: Identifier from the backup
            destination_id: Identifier assigned by the destination

        Raises:
            MappingConflictError: If the source ID is already mapped
        """
        key = normalize_source_id(source_id)
        entries = self._mappings[kind]
        if key in entries:
            raise MappingConflictError(kind.name, key, entries[key])

        entries[key] = destination_id
        logger.debug(f"Mapped {kind.name} {key} -> {destination_id}")

    def resolve(self, kind: EntityKind, source_id: object) -> int | None:
        """Look up the destination ID for a source ID.

        Args:
            kind: Entity kind
            source_id: Identifier from the backup (None resolves to None)

        Returns:
            Destination ID, or None if the source ID is unmapped
        """
        if source_id is None:
            return None
        if kind == EntityKind.USER and self._reassigned_user_id is not None:
            return self._reassigned_user_id
        return self._mappings[kind].get(normalize_source_id(source_id))

    def contains(self, kind: EntityKind, source_id: object) -> bool:
        """Check whether a source ID has a recorded entry (ignores reassignment)."""
        if source_id is None:
            return False
        return normalize_source_id(source_id) in self._mappings[kind]

    def count(self, kind: EntityKind) -> int:
        """Number of recorded entries for a kind."""
        return len(self._mappings[kind])

    def source_ids(self, kind: EntityKind) -> list[str]:
        """Recorded source IDs for a kind, in recording order."""
        return list(self._mappings[kind])
