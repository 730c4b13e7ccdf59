"""Shared pytest fixtures and factory functions for qdavault tests.

This module provides reusable destination stores, backup bundle writers and
import contexts to reduce boilerplate across tests.
"""

import json
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest

from qdavault.restoration.backup_reader import BackupReader
from qdavault.restoration.context import ImportContext
from qdavault.restoration.identity import IdentityMode, ResolvedIdentity
from qdavault.storage.content_storage import ContentStorage
from qdavault.storage.models import EntityKind
from qdavault.storage.repository import SQLiteRecordRepository

#
# Destination Fixtures
#


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Create temporary database file path.

    Args:
        tmp_path: Pytest temporary path fixture.

    Returns:
        Path: Temporary file path for database.
    """
    return tmp_path / "test_qdavault.db"


@pytest.fixture
def repository(db_path: Path):
    """Real SQLite repository in a temporary directory.

    Yields:
        SQLiteRecordRepository: Repository with the schema created.
    """
    repo = SQLiteRecordRepository(db_path)
    yield repo
    repo.close()


@pytest.fixture
def storage(tmp_path: Path) -> ContentStorage:
    """Content storage rooted in a temporary directory."""
    return ContentStorage(tmp_path / "storage")


@pytest.fixture
def create_user(repository: SQLiteRecordRepository) -> Callable[..., int]:
    """Factory inserting an existing destination user.

    Returns:
        Callable taking name and email, returning the destination user ID.
    """

    def _create(name: str, email: str) -> int:
        now = datetime.now(UTC)
        return repository.create(
            EntityKind.USER,
            {
                "name": name,
                "email": email,
                "password": "!existing",
                "created_at": now,
                "updated_at": now,
            },
        )

    return _create


#
# Backup Bundle Fixtures
#


@pytest.fixture
def bundle_dir(tmp_path: Path) -> Path:
    """Empty backup bundle directory."""
    path = tmp_path / "backup"
    path.mkdir()
    return path


@pytest.fixture
def write_entity(bundle_dir: Path) -> Callable[[EntityKind, Any], Path]:
    """Factory writing one entity file into the bundle.

    Returns:
        Callable taking an entity kind and JSON-serializable data.
    """

    def _write(kind: EntityKind, data: Any) -> Path:
        path = bundle_dir / kind.backup_filename
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_converted(bundle_dir: Path) -> Callable[[Any, str, str], Path]:
    """Factory writing a converted HTML rendering into a project content folder."""

    def _write(project_id: Any, base_name: str, html: str = "<p>converted</p>") -> Path:
        folder = bundle_dir / str(project_id) / "sources"
        folder.mkdir(parents=True, exist_ok=True)
        path = folder / f"{base_name}.html"
        path.write_text(html, encoding="utf-8")
        return path

    return _write


#
# Import Context Fixtures
#


@pytest.fixture
def make_context(
    bundle_dir: Path, repository: SQLiteRecordRepository, storage: ContentStorage
) -> Callable[..., ImportContext]:
    """Factory building an ImportContext over the temporary bundle and stores.

    Pass ``reassign_to`` (a destination user ID) to enable user reassignment.
    """

    def _make(reassign_to: int | None = None) -> ImportContext:
        if reassign_to is None:
            identity = ResolvedIdentity.import_originals()
        else:
            identity = ResolvedIdentity(
                mode=IdentityMode.EXPLICIT,
                user_id=reassign_to,
                name="Operator",
                email="operator@example.com",
            )

        context = ImportContext(
            bundle_path=bundle_dir,
            reader=BackupReader(bundle_dir),
            repository=repository,
            storage=storage,
            identity=identity,
        )
        if reassign_to is not None:
            context.mappings.reassign_users_to(reassign_to)
        return context

    return _make


@pytest.fixture
def context(make_context) -> ImportContext:
    """Import context importing original identities."""
    return make_context()


#
# Complete Bundle Fixtures
#

# One record of every kind plus a few broken ones:
# - user 3 has no email (failed)
# - code 22 points at a codebook that is not in the bundle (failed)
# - variable 32 points at a source that is not in the bundle (skipped)
# - audit 52 is about a selection that is not in the bundle (skipped)
FULL_BUNDLE: dict[EntityKind, list] = {
    EntityKind.USER: [
        {"id": 1, "name": "Ada", "email": "ada@example.com", "email_verified_at": "2023-01-02 10:00:00"},
        {"id": 2, "name": "", "email": "bob@example.com"},
        {"id": 3, "name": "No Email"},
    ],
    EntityKind.TEAM: [{"id": 1, "name": "Research", "user_id": 1, "personal_team": False}],
    EntityKind.PROJECT: [{"id": 3, "name": "Study", "team_id": 1, "creating_user_id": 1}],
    EntityKind.CODEBOOK: [{"id": 4, "name": "Main", "project_id": 3, "creating_user_id": 2}],
    EntityKind.CODE: [
        {"id": 21, "name": "Child", "codebook_id": 4, "parent_id": 20},
        {"id": 20, "name": "Root", "codebook_id": 4, "parent_id": None, "color": "#ff0000"},
        {"id": 22, "name": "Lost", "codebook_id": 999},
    ],
    EntityKind.SOURCE: [
        {"id": 11, "name": "Interview 1.docx", "project_id": 3, "user_id": 1, "content": "raw"}
    ],
    EntityKind.VARIABLE: [
        {"id": 31, "name": "age", "source_id": 11, "type_of_variable": "integer", "integer_value": 42},
        {"id": 32, "name": "orphan", "source_id": 99},
    ],
    EntityKind.SELECTION: [
        {
            "id": 41,
            "text": "quote",
            "source_id": 11,
            "code_id": 21,
            "project_id": 3,
            "start_position": 0,
            "end_position": 5,
            "creating_user_id": 1,
        }
    ],
    EntityKind.AUDIT: [
        {
            "id": 51,
            "event": "created",
            "auditable_type": "App\\Models\\Code",
            "auditable_id": 21,
            "user_id": 1,
        },
        {"id": 52, "event": "updated", "auditable_type": "App\\Models\\Selection", "auditable_id": 999},
    ],
}


@pytest.fixture
def full_bundle(bundle_dir: Path, write_entity, write_converted) -> Path:
    """Bundle with every entity file and one converted source rendering."""
    for kind, records in FULL_BUNDLE.items():
        write_entity(kind, records)
    write_converted(3, "Interview 1", "<h1>Interview 1</h1>")
    return bundle_dir


@pytest.fixture
def clean_bundle(bundle_dir: Path, write_entity) -> Path:
    """Bundle with every entity file present and nothing that fails or warns."""
    for kind in EntityKind:
        write_entity(kind, [])
    write_entity(EntityKind.USER, [{"id": 1, "name": "Ada", "email": "ada@example.com"}])
    write_entity(EntityKind.PROJECT, [{"id": 3, "name": "Study", "creating_user_id": 1}])
    return bundle_dir
