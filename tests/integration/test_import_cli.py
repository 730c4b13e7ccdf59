"""Integration tests for the import command."""

import json
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from qdavault.cli.main import app
from qdavault.storage.models import EntityKind
from qdavault.storage.repository import SQLiteRecordRepository

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep config lookup and default paths inside the test directory."""
    for name in ("QDAVAULT_CONFIG", "QDAVAULT_DB_PATH", "QDAVAULT_STORAGE_ROOT", "QDAVAULT_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(typer, "get_app_dir", lambda name: str(tmp_path / "appdir"))
    monkeypatch.chdir(tmp_path)


def _import_args(bundle: Path, tmp_path: Path, *extra: str) -> list[str]:
    return [
        "import",
        str(bundle),
        "--db",
        str(tmp_path / "out.db"),
        "--storage-root",
        str(tmp_path / "out-storage"),
        *extra,
    ]


def test_version_command() -> None:
    """Test --version flag."""
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "qdavault version 0.1.0" in result.output


def test_import_command_help() -> None:
    """Test import command --help."""
    result = runner.invoke(app, ["import", "--help"])
    assert result.exit_code == 0
    assert "--current-user" in result.output
    assert "--user" in result.output


def test_record_failures_still_exit_zero(full_bundle: Path, tmp_path: Path) -> None:
    result = runner.invoke(app, _import_args(full_bundle, tmp_path))

    assert result.exit_code == 0
    assert "Importing users..." in result.output
    assert "Import Summary:" in result.output
    assert "Import completed with 2 failures" in result.output
    assert "ada@example.com" in result.output
    assert (tmp_path / "out-storage" / "projects").is_dir()


def test_clean_import_reports_success(clean_bundle: Path, tmp_path: Path) -> None:
    result = runner.invoke(app, _import_args(clean_bundle, tmp_path))

    assert result.exit_code == 0
    assert "Import completed successfully! 2 items imported." in result.output

    with SQLiteRecordRepository(tmp_path / "out.db") as repository:
        assert repository.count(EntityKind.USER) == 1
        assert repository.count(EntityKind.PROJECT) == 1


def test_missing_bundle_exits_one_without_touching_database(tmp_path: Path) -> None:
    result = runner.invoke(app, _import_args(tmp_path / "missing", tmp_path))

    assert result.exit_code == 1
    assert "Backup directory not found" in result.output
    assert not (tmp_path / "out.db").exists()


def test_unknown_user_exits_one(clean_bundle: Path, tmp_path: Path) -> None:
    result = runner.invoke(
        app, _import_args(clean_bundle, tmp_path, "--user", "nobody@example.com")
    )

    assert result.exit_code == 1
    assert "User not found: nobody@example.com" in result.output

    with SQLiteRecordRepository(tmp_path / "out.db") as repository:
        assert repository.count(EntityKind.PROJECT) == 0


def _seed_operator(db_path: Path) -> int:
    with SQLiteRecordRepository(db_path) as repository:
        return repository.create(
            EntityKind.USER,
            {
                "name": "Operator",
                "email": "operator@example.com",
                "password": "!existing",
                "created_at": "2024-01-01T00:00:00+00:00",
                "updated_at": "2024-01-01T00:00:00+00:00",
            },
        )


def test_explicit_user_by_email(clean_bundle: Path, tmp_path: Path) -> None:
    operator = _seed_operator(tmp_path / "out.db")

    result = runner.invoke(
        app, _import_args(clean_bundle, tmp_path, "--user", "operator@example.com")
    )

    assert result.exit_code == 0
    assert "Attaching all data to user: Operator" in result.output
    with SQLiteRecordRepository(tmp_path / "out.db") as repository:
        assert repository.count(EntityKind.USER) == 1
        project = repository.list_all(EntityKind.PROJECT)[0]
        assert project["creating_user_id"] == operator


def test_interactive_user_selection(clean_bundle: Path, tmp_path: Path) -> None:
    operator = _seed_operator(tmp_path / "out.db")

    result = runner.invoke(
        app, _import_args(clean_bundle, tmp_path, "--current-user"), input="1\n"
    )

    assert result.exit_code == 0
    assert "[1] Operator (operator@example.com)" in result.output
    with SQLiteRecordRepository(tmp_path / "out.db") as repository:
        project = repository.list_all(EntityKind.PROJECT)[0]
        assert project["creating_user_id"] == operator


def test_interactive_without_users_exits_one(clean_bundle: Path, tmp_path: Path) -> None:
    result = runner.invoke(app, _import_args(clean_bundle, tmp_path, "--current-user"))

    assert result.exit_code == 1
    assert "No users found in the system" in result.output


def test_json_output(clean_bundle: Path, tmp_path: Path) -> None:
    result = runner.invoke(app, _import_args(clean_bundle, tmp_path, "--output", "json"))

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["by_kind"] == {
        "users": {"success": 1, "skipped": 0, "failed": 0},
        "projects": {"success": 1, "skipped": 0, "failed": 0},
    }
    assert data["failed"] == 0
    assert data["password_reset_emails"] == ["ada@example.com"]


def test_invalid_output_format(clean_bundle: Path, tmp_path: Path) -> None:
    result = runner.invoke(app, _import_args(clean_bundle, tmp_path, "--output", "xml"))

    assert result.exit_code == 1
    assert not (tmp_path / "out.db").exists()


def test_config_file_supplies_destination(clean_bundle: Path, tmp_path: Path) -> None:
    config_file = tmp_path / "qdavault.toml"
    config_file.write_text(
        '[qdavault]\ndb_path = "from-config.db"\nstorage_root = "from-config-storage"\n'
    )

    result = runner.invoke(app, ["import", str(clean_bundle), "--config", str(config_file)])

    assert result.exit_code == 0
    assert (tmp_path / "from-config.db").exists()


def test_invalid_config_exits_one(clean_bundle: Path, tmp_path: Path) -> None:
    config_file = tmp_path / "broken.toml"
    config_file.write_text("[qdavault\n")

    result = runner.invoke(app, ["import", str(clean_bundle), "--config", str(config_file)])

    assert result.exit_code == 1
    assert "Invalid TOML syntax" in result.output


def test_interactive_selection_with_json_output(clean_bundle: Path, tmp_path: Path) -> None:
    operator = _seed_operator(tmp_path / "out.db")

    result = runner.invoke(
        app,
        _import_args(clean_bundle, tmp_path, "--current-user", "--output", "json"),
        input="1\n",
    )

    assert result.exit_code == 0
    assert "[1] Operator (operator@example.com)" in result.stderr
    data = json.loads(result.stdout)
    assert data["by_kind"]["users"] == {"success": 0, "skipped": 1, "failed": 0}
    with SQLiteRecordRepository(tmp_path / "out.db") as repository:
        assert repository.list_all(EntityKind.PROJECT)[0]["creating_user_id"] == operator


def test_user_name_with_markup_is_printed_literally(clean_bundle: Path, tmp_path: Path) -> None:
    with SQLiteRecordRepository(tmp_path / "out.db") as repository:
        repository.create(
            EntityKind.USER,
            {
                "name": "Ops [/team]",
                "email": "ops@example.com",
                "password": "!existing",
                "created_at": "2024-01-01T00:00:00+00:00",
                "updated_at": "2024-01-01T00:00:00+00:00",
            },
        )

    result = runner.invoke(app, _import_args(clean_bundle, tmp_path, "--user", "ops@example.com"))

    assert result.exit_code == 0
    assert "Attaching all data to user: Ops [/team] (ops@example.com)" in result.output
