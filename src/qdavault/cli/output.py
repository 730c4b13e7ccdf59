"""Output formatting utilities for the import command."""

import json
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from qdavault.cli.rich_logging import print_info, print_success, print_warning
from qdavault.constants import SUMMARY_RULE_WIDTH
from qdavault.restoration.statistics import ImportStatistics
from qdavault.storage.models import EntityKind


def format_json(data: Any) -> str:
    """
    Format data as JSON string.

    Args:
        data: Data to format (must be JSON-serializable)

    Returns:
        Pretty-printed JSON string
    """
    return json.dumps(data, indent=2, default=str)


def build_summary_table(statistics: ImportStatistics) -> Table:
    """
    Build the per-entity summary table.

    Only entity kinds that had at least one record are listed.

    Args:
        statistics: Counters from the import run

    Returns:
        Rich Table with Entity / Success / Skipped / Failed columns
    """
    table = Table(show_header=True, header_style="bold")
    table.add_column("Entity")
    table.add_column("Success", justify="right", style="green")
    table.add_column("Skipped", justify="right", style="yellow")
    table.add_column("Failed", justify="right", style="red")

    for kind in EntityKind:
        counts = statistics.counts(kind)
        if counts.total > 0:
            table.add_row(
                kind.label, str(counts.success), str(counts.skipped), str(counts.failed)
            )

    return table


def format_import_summary(statistics: ImportStatistics, console: Console) -> None:
    """
    Print the end-of-run summary: table, then a completion line.

    Args:
        statistics: Counters from the import run
        console: Console to print to
    """
    rule = "═" * SUMMARY_RULE_WIDTH

    console.print()
    print_info("Import Summary:", console)
    print_info(rule, console)
    console.print(build_summary_table(statistics))
    print_info(rule, console)

    if statistics.has_failures:
        print_warning(
            f"Import completed with {statistics.total_failed} failures. Check logs for details.",
            console,
        )
    else:
        print_success(
            f"Import completed successfully! {statistics.total_success} items imported.",
            console,
        )


def format_password_reset_notice(emails: list[str], console: Console) -> None:
    """
    Tell the operator which imported users need a credential reset.

    Imported users get an unusable password; resets have to be issued
    separately.

    Args:
        emails: Emails of users created during the run
        console: Console to print to
    """
    if not emails:
        return

    console.print()
    print_warning(
        f"{len(emails)} imported user(s) have no usable password and need a password reset:",
        console,
    )
    for email in emails:
        console.print(f"  • {escape(email)}")
