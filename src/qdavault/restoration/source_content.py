"""Recovery of previously converted source content from a backup bundle."""

import logging
from pathlib import Path
from typing import Any

from qdavault.constants import (
    CONVERTED_CONTENT_FILENAME,
    CONVERTED_CONTENT_SUFFIX,
    CONVERTED_STATUS,
    PROJECT_CONTENT_FOLDER,
)
from qdavault.storage.content_storage import ContentStorage
from qdavault.storage.repository import RecordRepository
from qdavault.utils.path_utils import (
    path_stem,
    portable_filename,
    sanitize_candidate_name,
    strip_document_extension,
)

logger = logging.getLogger(__name__)


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def candidate_names(record: dict[str, Any]) -> list[str]:
    """Base names a source's converted rendering may have been exported under.

    In probing order:
    1. the source name without its document extension
    2. the same with file-name-unsafe characters replaced by ``_``
    3. the upload path's base name without extension
    4. the original file name without its document extension
    5. the source name made portable to every platform (trailing dots and
       spaces dropped, reserved names suffixed)

    Empty names and repeats are dropped, keeping first occurrences.

    Example:
        >>> candidate_names({"name": "Interview 1.docx", "upload_path": "up/abc.docx"})
        ['Interview 1', 'abc']
    """
    names = []

    name = _text(record.get("name"))
    if name:
        stripped = strip_document_extension(name)
        names.append(stripped)
        names.append(sanitize_candidate_name(stripped))

    upload_path = _text(record.get("upload_path"))
    if upload_path:
        names.append(path_stem(upload_path))

    original_name = _text(record.get("original_name"))
    if original_name:
        names.append(strip_document_extension(original_name))

    if name:
        names.append(portable_filename(strip_document_extension(name)))

    return list(dict.fromkeys(n for n in names if n))


def converted_content_key(project_id: int | None, source_id: int) -> str:
    """Storage key of a source's converted rendering."""
    if project_id is None:
        return f"sources/{source_id}/{CONVERTED_CONTENT_FILENAME}"
    return f"projects/{project_id}/sources/{source_id}/{CONVERTED_CONTENT_FILENAME}"


class SourceContentRecovery:
    """Copies a source's converted HTML from the bundle into content storage.

    Converted renderings are exported per project as
    ``<bundle>/<source project id>/sources/<name>.html``. The first candidate
    name that exists is copied to destination storage and a conversion-status
    marker pointing at the stored file is created or updated.
    """

    def __init__(
        self, bundle_path: str | Path, storage: ContentStorage, repository: RecordRepository
    ):
        self.bundle_path = Path(bundle_path)
        self.storage = storage
        self.repository = repository

    def content_folder(self, source_project_id: Any) -> Path:
        """Bundle folder holding converted renderings of one source project."""
        return self.bundle_path / _text(source_project_id) / PROJECT_CONTENT_FOLDER

    def find_converted_file(self, record: dict[str, Any]) -> Path | None:
        """First existing converted rendering for a source record, if any."""
        if _text(record.get("project_id")) == "":
            return None

        folder = self.content_folder(record["project_id"])
        if not folder.is_dir():
            return None

        for candidate in candidate_names(record):
            if Path(candidate).name != candidate:
                logger.debug(f"Ignoring candidate outside content folder: {candidate!r}")
                continue
            path = folder / f"{candidate}{CONVERTED_CONTENT_SUFFIX}"
            if path.is_file():
                return path
        return None

    def recover(
        self, record: dict[str, Any], source_id: int, project_id: int | None
    ) -> Path | None:
        """Attach converted content to a newly created destination source.

        Args:
            record: Source record from the backup
            source_id: Destination source ID
            project_id: Destination project ID of the source (may be None)

        Returns:
            Absolute path of the stored rendering, or None if none was found

        Raises:
            StorageError: If copying or saving the marker fails
        """
        converted = self.find_converted_file(record)
        if converted is None:
            logger.debug(f"No converted content found for source {source_id}")
            return None

        key = converted_content_key(project_id, source_id)
        stored = self.storage.put_from_path(key, converted)
        self.repository.upsert_source_status(source_id, CONVERTED_STATUS, str(stored))

        logger.info(f"Recovered converted content for source {source_id}: {key}")
        return stored
