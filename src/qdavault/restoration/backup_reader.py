"""Backup bundle reader."""

import logging
from pathlib import Path
from typing import Any

import msgspec

from qdavault.exceptions import BackupReadError, BundleNotFoundError
from qdavault.storage.models import EntityKind

logger = logging.getLogger(__name__)


def ensure_bundle_exists(bundle_path: str | Path) -> Path:
    """Check that a backup bundle directory exists.

    Raises:
        BundleNotFoundError: If the path is not a directory
    """
    path = Path(bundle_path)
    if not path.is_dir():
        raise BundleNotFoundError(f"Backup directory not found: {path}")
    return path


class BackupReader:
    """Loads per-entity record lists from a backup bundle directory.

    Each entity kind lives in ``<bundle>/<plural>.json`` as a JSON array of
    objects. A missing or malformed file degrades to an empty list: the
    problem is logged and the import carries on with the next kind.
    """

    def __init__(self, bundle_path: str | Path):
        """Initialize reader.

        Args:
            bundle_path: Backup bundle directory
        """
        self.bundle_path = Path(bundle_path)

    def file_path(self, kind: EntityKind) -> Path:
        """Path of the record list file for an entity kind."""
        return self.bundle_path / kind.backup_filename

    def read(self, kind: EntityKind) -> list[Any]:
        """Read and decode one entity file.

        Args:
            kind: Entity kind to read

        Returns:
            Decoded records

        Raises:
            BackupReadError: If the file is missing, unreadable or not a JSON list
        """
        path = self.file_path(kind)
        if not path.is_file():
            raise BackupReadError(f"File not found: {path.name}")

        try:
            data = msgspec.json.decode(path.read_bytes())
        except OSError as e:
            raise BackupReadError(f"Failed to read {path.name}: {e}") from e
        except msgspec.DecodeError as e:
            raise BackupReadError(f"Invalid JSON in {path.name}: {e}") from e

        if data is None:
            return []
        if not isinstance(data, list):
            raise BackupReadError(
                f"Invalid JSON in {path.name}: expected a list of records, "
                f"got {type(data).__name__}"
            )
        return data

    def load(self, kind: EntityKind) -> list[Any]:
        """Load one entity's records, tolerating missing or malformed files.

        Args:
            kind: Entity kind to load

        Returns:
            Decoded records, or an empty list if the file is absent or invalid
        """
        try:
            records = self.read(kind)
        except BackupReadError as e:
            if self.file_path(kind).exists():
                logger.error(f"{e} - skipping {kind.plural}")
            else:
                logger.warning(f"{e} - skipping {kind.plural}")
            return []

        logger.info(f"Loaded {len(records)} {kind.plural} from {self.file_path(kind)}")
        return records
