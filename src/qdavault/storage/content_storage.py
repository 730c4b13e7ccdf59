"""Filesystem content storage for converted source renderings."""

import logging
import os
import shutil
from pathlib import Path, PurePosixPath

from qdavault.exceptions import NotFoundError, StorageError

logger = logging.getLogger(__name__)

COPY_BUFFER_SIZE = 1024 * 1024


class ContentStorage:
    """Path-qualified file storage rooted at one directory.

    Keys are POSIX-style relative paths such as
    ``projects/3/sources/17/converted.html``. Keys that would escape the root
    are rejected.
    """

    def __init__(self, root: str | Path):
        """Initialize storage.

        Args:
            root: Storage root directory (created on first write)
        """
        self.root = Path(root).resolve()

    def path(self, key: str) -> Path:
        """Resolve a storage key to an absolute filesystem path.

        Args:
            key: Relative storage key

        Returns:
            Absolute path under the storage root

        Raises:
            StorageError: If the key is absolute or escapes the root
        """
        relative = PurePosixPath(key)
        if not key or relative.is_absolute() or ".." in relative.parts:
            raise StorageError(f"Invalid storage key: {key!r}")
        return self.root.joinpath(*relative.parts)

    def exists(self, key: str) -> bool:
        """Check whether a file is stored under a key."""
        return self.path(key).is_file()

    def read(self, key: str) -> bytes:
        """Read a stored file.

        Raises:
            NotFoundError: If nothing is stored under the key
        """
        target = self.path(key)
        if not target.is_file():
            raise NotFoundError(f"No stored content for {key}")
        return target.read_bytes()

    def put(self, key: str, content: bytes) -> Path:
        """Store bytes under a key, replacing any existing file.

        Returns:
            Absolute path of the stored file
        """
        target = self.path(key)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as e:
            raise StorageError(f"Failed to store {key}: {e}") from e
        return target

    def put_from_path(self, key: str, source_path: str | Path) -> Path:
        """Copy a file into storage under a key.

        The copy lands in a temporary sibling first and is moved into place, so
        a reader never sees a half-written file.

        Returns:
            Absolute path of the stored file
        """
        target = self.path(key)
        tmp_path = target.with_suffix(f"{target.suffix}.uploading")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(source_path, "rb") as src, open(tmp_path, "wb") as dst:
                shutil.copyfileobj(src, dst, length=COPY_BUFFER_SIZE)
            os.replace(tmp_path, target)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise StorageError(f"Failed to copy {source_path} to {key}: {e}") from e

        logger.debug(f"Stored {source_path} as {key}")
        return target
