"""Unit tests for SourceImporter and converted content recovery."""

import logging
from unittest.mock import Mock

import pytest

from qdavault.exceptions import StorageError
from qdavault.restoration.importers import SourceImporter
from qdavault.storage.models import EntityKind, ImportOutcome


@pytest.fixture
def source_context(context):
    context.mappings.record(EntityKind.PROJECT, 3, 7)
    return context


def test_converted_content_is_attached(source_context, repository, storage, write_converted) -> None:
    write_converted(3, "Interview 1", "<h1>Interview</h1>")

    result = SourceImporter(source_context).import_records(
        [{"id": 11, "name": "Interview 1.docx", "project_id": 3, "content": "raw"}]
    )[0]

    assert result.outcome == ImportOutcome.SUCCESS
    key = f"projects/7/sources/{result.destination_id}/converted.html"
    assert storage.read(key) == b"<h1>Interview</h1>"

    marker = repository.get_source_status(result.destination_id)
    assert marker["status"] == "converted:html"
    assert marker["path"] == str(storage.path(key))


def test_no_candidate_file_means_no_marker(source_context, repository, write_converted) -> None:
    write_converted(3, "Someone Else")

    result = SourceImporter(source_context).import_records(
        [{"id": 12, "name": "Field Notes.pdf", "project_id": 3}]
    )[0]

    assert result.outcome == ImportOutcome.SUCCESS
    assert repository.get(EntityKind.SOURCE, result.destination_id)["name"] == "Field Notes.pdf"
    assert repository.get_source_status(result.destination_id) is None


def test_upload_path_candidate(source_context, repository, write_converted) -> None:
    write_converted(3, "a1b2c3")

    result = SourceImporter(source_context).import_records(
        [{"id": 13, "name": "Renamed", "project_id": 3, "upload_path": "uploads/3/a1b2c3.docx"}]
    )[0]

    assert repository.get_source_status(result.destination_id) is not None


def test_recovery_failure_does_not_fail_source(
    source_context, repository, caplog: pytest.LogCaptureFixture
) -> None:
    recovery = Mock()
    recovery.recover.side_effect = StorageError("disk full")

    with caplog.at_level(logging.WARNING):
        result = SourceImporter(source_context, recovery=recovery).import_records(
            [{"id": 14, "name": "Doc", "project_id": 3}]
        )[0]

    assert result.outcome == ImportOutcome.SUCCESS
    assert source_context.mappings.resolve(EntityKind.SOURCE, 14) == result.destination_id
    assert "disk full" in caplog.text


def test_fields_and_defaults(source_context, repository) -> None:
    source_context.mappings.record(EntityKind.USER, 2, 20)

    result = SourceImporter(source_context).import_records(
        [{"id": 15, "name": "Doc", "project_id": 3, "user_id": 2, "upload_path": "up/doc.txt"}]
    )[0]

    source = repository.get(EntityKind.SOURCE, result.destination_id)
    assert source["type"] == "text"
    assert source["project_id"] == 7
    assert source["creating_user_id"] == 20
    assert source["modifying_user_id"] == 20
    assert source["upload_path"] == "up/doc.txt"


def test_missing_name_fails(source_context) -> None:
    result = SourceImporter(source_context).import_records([{"id": 16, "project_id": 3}])[0]

    assert result.outcome == ImportOutcome.FAILED
    assert source_context.statistics.counts(EntityKind.SOURCE).failed == 1
