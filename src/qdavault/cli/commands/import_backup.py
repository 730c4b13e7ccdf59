"""Import command implementation for restoring a backup bundle."""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from qdavault.cli.output import format_import_summary, format_json, format_password_reset_notice
from qdavault.cli.rich_logging import (
    configure_rich_logging,
    get_console,
    print_error,
    print_info,
    print_warning,
)
from qdavault.config.loader import load_config
from qdavault.exceptions import ConfigError, QdaVaultError
from qdavault.restoration import (
    IdentityResolver,
    ImportOrchestrator,
    ImportReport,
    ensure_bundle_exists,
)
from qdavault.storage import ContentStorage, SQLiteRecordRepository

logger = logging.getLogger(__name__)

# Exit codes (matching CLI interface contract)
EXIT_SUCCESS = 0
EXIT_GENERAL_ERROR = 1
EXIT_INTERRUPTED = 130


def run(
    bundle_path: Path,
    current_user: bool = False,
    user: str | None = None,
    db: str | None = None,
    storage_root: str | None = None,
    config: Path | None = None,
    output: str = "table",
    verbose: bool = False,
    debug: bool = False,
) -> None:
    """
    Import a backup bundle into the destination database.

    Per-record failures are reported in the summary and never change the exit
    code; only configuration problems (missing bundle, unresolved identity,
    invalid config) exit with 1.

    Args:
        bundle_path: Backup bundle directory
        current_user: Attach all data to an interactively chosen user
        user: Attach all data to this user (ID or email)
        db: Destination database path (overrides config)
        storage_root: Destination content storage root (overrides config)
        config: Optional path to config file
        output: Output format ("table" or "json")
        verbose: Show INFO logs on the console
        debug: Show DEBUG logs on the console
    """
    if output not in ("table", "json"):
        print_error(f"Invalid output format: {output}. Use 'table' or 'json'.")
        raise typer.Exit(EXIT_GENERAL_ERROR)

    if debug:
        log_level = logging.DEBUG
    elif verbose:
        log_level = logging.INFO
    else:
        log_level = logging.WARNING

    out = get_console()
    # json output keeps stdout machine-readable
    progress_console = out if output == "table" else None

    try:
        cfg = load_config(config)
        settings = cfg.qdavault

        configure_rich_logging(
            level=log_level,
            show_time=debug,
            show_path=debug,
            enable_link_path=debug,
            log_file=settings.log_path,
        )

        bundle = ensure_bundle_exists(bundle_path)
        db_path = db or settings.db_path
        storage = ContentStorage(storage_root or settings.storage_root)
        logger.info(f"Importing {bundle} into {db_path} (storage: {storage.root})")

        with SQLiteRecordRepository(db_path) as repository:
            # json output keeps the user listing and prompt off stdout
            prompt_console = out if output == "table" else get_console(stderr=True)
            resolver = IdentityResolver(repository, console=prompt_console)
            identity = resolver.resolve(current_user=current_user, user=user)
            if identity.reassigning and progress_console is not None:
                chosen = f"{identity.name} ({identity.email})"
                print_info(
                    f"Attaching all data to user: {escape(chosen)}",
                    progress_console,
                )

            if progress_console is not None:
                print_info(f"Importing from: {escape(str(bundle))}", progress_console)

            report = ImportOrchestrator(
                bundle, repository, storage, identity, console=progress_console
            ).run()

    except ConfigError as e:
        print_error(escape(str(e)), out)
        raise typer.Exit(EXIT_GENERAL_ERROR) from None
    except QdaVaultError as e:
        print_error(f"Import aborted: {escape(str(e))}", out)
        logger.debug("Import aborted", exc_info=True)
        raise typer.Exit(EXIT_GENERAL_ERROR) from None
    except OSError as e:
        print_error(f"Import aborted: {escape(str(e))}", out)
        logger.debug("Import aborted", exc_info=True)
        raise typer.Exit(EXIT_GENERAL_ERROR) from None
    except KeyboardInterrupt:
        print_warning("Import interrupted by user", out)
        raise typer.Exit(EXIT_INTERRUPTED) from None

    _report(report, output, out)


def _report(report: ImportReport, output: str, out: Console) -> None:
    if output == "json":
        data = report.statistics.snapshot()
        data["password_reset_emails"] = list(report.password_reset_emails)
        out.print_json(format_json(data))
        return

    format_password_reset_notice(report.password_reset_emails, out)
    format_import_summary(report.statistics, out)
