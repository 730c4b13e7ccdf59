"""End-to-end tests running every import stage over a complete bundle."""

from pathlib import Path

import pytest

from qdavault.exceptions import BundleNotFoundError
from qdavault.restoration import ImportOrchestrator
from qdavault.restoration.identity import IdentityMode, ResolvedIdentity
from qdavault.storage.models import EntityKind, ImportOutcome


def _outcomes(report, kind: EntityKind) -> dict[str, ImportOutcome]:
    return {r.source_id: r.outcome for r in report.results[kind]}


def _destination(report, kind: EntityKind, source_id: str) -> int:
    return next(r.destination_id for r in report.results[kind] if r.source_id == source_id)


def test_full_bundle_imports_in_dependency_order(full_bundle, repository, storage) -> None:
    report = ImportOrchestrator(
        full_bundle, repository, storage, ResolvedIdentity.import_originals()
    ).run()

    assert list(report.results) == list(EntityKind)
    assert report.statistics.total_success == 11
    assert report.statistics.total_skipped == 2
    assert report.statistics.total_failed == 2
    assert report.has_failures

    assert _outcomes(report, EntityKind.USER)["3"] == ImportOutcome.FAILED
    assert _outcomes(report, EntityKind.CODE)["22"] == ImportOutcome.FAILED
    assert _outcomes(report, EntityKind.VARIABLE)["32"] == ImportOutcome.SKIPPED
    assert _outcomes(report, EntityKind.AUDIT)["52"] == ImportOutcome.SKIPPED


def test_references_point_at_destination_records(full_bundle, repository, storage) -> None:
    report = ImportOrchestrator(
        full_bundle, repository, storage, ResolvedIdentity.import_originals()
    ).run()

    ada = _destination(report, EntityKind.USER, "1")
    bob = _destination(report, EntityKind.USER, "2")
    project = repository.get(EntityKind.PROJECT, _destination(report, EntityKind.PROJECT, "3"))
    codebook = repository.get(EntityKind.CODEBOOK, _destination(report, EntityKind.CODEBOOK, "4"))
    root = repository.get(EntityKind.CODE, _destination(report, EntityKind.CODE, "20"))
    child = repository.get(EntityKind.CODE, _destination(report, EntityKind.CODE, "21"))
    selection = repository.get(
        EntityKind.SELECTION, _destination(report, EntityKind.SELECTION, "41")
    )

    assert project["team_id"] == _destination(report, EntityKind.TEAM, "1")
    assert project["creating_user_id"] == ada
    assert codebook["creating_user_id"] == bob
    assert codebook["project_id"] == project["id"]
    assert root["parent_id"] is None
    assert root["color"] == "#ff0000"
    assert child["parent_id"] == root["id"]
    assert child["color"] == "#000000"
    assert selection["code_id"] == child["id"]
    assert selection["source_id"] == _destination(report, EntityKind.SOURCE, "11")

    audit = repository.get(EntityKind.AUDIT, _destination(report, EntityKind.AUDIT, "51"))
    assert audit["auditable_id"] == child["id"]
    assert audit["user_id"] == ada


def test_users_are_created_with_reset_required(full_bundle, repository, storage) -> None:
    report = ImportOrchestrator(
        full_bundle, repository, storage, ResolvedIdentity.import_originals()
    ).run()

    assert report.password_reset_emails == ["ada@example.com", "bob@example.com"]
    bob = repository.find_by(EntityKind.USER, email="bob@example.com")
    assert bob["name"] == "Imported User"
    assert bob["password"].startswith("!")


def test_converted_content_is_recovered(full_bundle, repository, storage) -> None:
    report = ImportOrchestrator(
        full_bundle, repository, storage, ResolvedIdentity.import_originals()
    ).run()

    source_id = _destination(report, EntityKind.SOURCE, "11")
    project_id = _destination(report, EntityKind.PROJECT, "3")
    key = f"projects/{project_id}/sources/{source_id}/converted.html"

    assert storage.read(key) == b"<h1>Interview 1</h1>"
    assert repository.get_source_status(source_id)["status"] == "converted:html"


def test_reassignment_attaches_everything_to_one_user(
    full_bundle, repository, storage, create_user
) -> None:
    operator = create_user("Operator", "operator@example.com")
    identity = ResolvedIdentity(
        mode=IdentityMode.EXPLICIT,
        user_id=operator,
        name="Operator",
        email="operator@example.com",
    )

    report = ImportOrchestrator(full_bundle, repository, storage, identity).run()

    assert repository.count(EntityKind.USER) == 1
    assert report.password_reset_emails == []
    assert all(r.outcome == ImportOutcome.SKIPPED for r in report.results[EntityKind.USER])

    project = repository.get(EntityKind.PROJECT, _destination(report, EntityKind.PROJECT, "3"))
    codebook = repository.get(EntityKind.CODEBOOK, _destination(report, EntityKind.CODEBOOK, "4"))
    assert project["creating_user_id"] == operator
    assert codebook["creating_user_id"] == operator


def test_missing_entity_files_are_empty_stages(bundle_dir, write_entity, repository, storage) -> None:
    write_entity(EntityKind.USER, [{"id": 1, "email": "ada@example.com"}])

    report = ImportOrchestrator(
        bundle_dir, repository, storage, ResolvedIdentity.import_originals()
    ).run()

    assert report.statistics.total_success == 1
    assert report.results[EntityKind.CODE] == []
    assert not report.has_failures


def test_missing_bundle_aborts_before_importing(tmp_path: Path, repository, storage) -> None:
    orchestrator = ImportOrchestrator(
        tmp_path / "nowhere", repository, storage, ResolvedIdentity.import_originals()
    )

    with pytest.raises(BundleNotFoundError, match="Backup directory not found"):
        orchestrator.run()
    assert repository.count(EntityKind.USER) == 0
