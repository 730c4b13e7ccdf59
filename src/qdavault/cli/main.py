"""Main Typer application for the qdavault CLI."""

from pathlib import Path
from typing import Annotated

import typer

from qdavault import __version__
from qdavault.constants import DEFAULT_BUNDLE_PATH

app = typer.Typer(
    help="qdavault - Restore QDA backup bundles into a fresh database",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"qdavault version {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """qdavault CLI main callback."""
    pass


@app.command(name="import")
def import_backup(
    path: Annotated[
        Path,
        typer.Argument(help="Backup bundle directory"),
    ] = Path(DEFAULT_BUNDLE_PATH),
    current_user: Annotated[
        bool,
        typer.Option(
            "--current-user",
            help="Attach all imported data to a user chosen from the existing users",
        ),
    ] = False,
    user: Annotated[
        str | None,
        typer.Option(
            "--user",
            "-u",
            help="Attach all imported data to this user (ID or email). Wins over --current-user",
        ),
    ] = None,
    db: Annotated[
        str | None,
        typer.Option("--db", help="Destination database path"),
    ] = None,
    storage_root: Annotated[
        str | None,
        typer.Option("--storage-root", help="Destination content storage directory"),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to configuration file"),
    ] = None,
    output: Annotated[
        str,
        typer.Option("--output", "-o", help='Output format: "table" or "json"'),
    ] = "table",
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging"),
    ] = False,
) -> None:
    """Import users, projects, codes, sources and their history from a backup bundle."""
    from .commands import import_backup as import_module

    import_module.run(
        bundle_path=path,
        current_user=current_user,
        user=user,
        db=db,
        storage_root=storage_root,
        config=config,
        output=output,
        verbose=verbose,
        debug=debug,
    )


if __name__ == "__main__":
    app()
