"""Unit tests for output formatting."""

import json

from rich.console import Console

from qdavault.cli.output import (
    build_summary_table,
    format_import_summary,
    format_json,
    format_password_reset_notice,
)
from qdavault.cli.rich_logging import QDAVAULT_THEME
from qdavault.restoration.statistics import ImportStatistics
from qdavault.storage.models import EntityKind, ImportOutcome


def _console() -> Console:
    return Console(theme=QDAVAULT_THEME, record=True, width=100)


def _stats(**failed: int) -> ImportStatistics:
    stats = ImportStatistics()
    stats.record(EntityKind.USER, ImportOutcome.SUCCESS)
    stats.record(EntityKind.CODE, ImportOutcome.SUCCESS)
    stats.record(EntityKind.CODE, ImportOutcome.SKIPPED)
    for _ in range(failed.get("codes", 0)):
        stats.record(EntityKind.CODE, ImportOutcome.FAILED)
    return stats


def test_format_json_with_dict() -> None:
    """Test JSON formatting with dictionary."""
    parsed = json.loads(format_json({"key": "value", "number": 42}))

    assert parsed == {"key": "value", "number": 42}


def test_summary_table_lists_only_kinds_with_records() -> None:
    table = build_summary_table(_stats())

    assert table.row_count == 2


def test_summary_reports_success() -> None:
    console = _console()
    format_import_summary(_stats(), console)

    text = console.export_text()
    assert "Import Summary:" in text
    assert "Users" in text
    assert "Codes" in text
    assert "Projects" not in text
    assert "Import completed successfully! 2 items imported." in text


def test_summary_reports_failures() -> None:
    console = _console()
    format_import_summary(_stats(codes=3), console)

    assert "Import completed with 3 failures. Check logs for details." in console.export_text()


def test_password_reset_notice() -> None:
    console = _console()
    format_password_reset_notice(["a@example.com", "b@example.com"], console)

    text = console.export_text()
    assert "2 imported user(s)" in text
    assert "a@example.com" in text


def test_no_password_reset_notice_without_users() -> None:
    console = _console()
    format_password_reset_notice([], console)

    assert console.export_text() == ""
