"""Rich logging utilities for CLI output."""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

# Define custom theme for consistent colors
QDAVAULT_THEME = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "success": "bold green",
        "dim": "dim",
        "highlight": "bold magenta",
    }
)

# Global console instance with custom theme
console = Console(theme=QDAVAULT_THEME, stderr=True)

FILE_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_rich_logging(
    level: int = logging.INFO,
    show_time: bool = True,
    show_path: bool = False,
    enable_link_path: bool = False,
    log_file: Path | None = None,
) -> None:
    """Configure rich logging handler, plus an optional plain log file.

    The log file always receives INFO and above, whatever the console level,
    so it keeps the full record of an import run.

    Args:
        level: Console logging level (logging.DEBUG, logging.INFO, etc.)
        show_time: Show timestamp in log output
        show_path: Show file path in log output
        enable_link_path: Enable clickable file paths in log output
        log_file: Optional path of a log file to append to
    """
    # Remove existing handlers
    logging.root.handlers.clear()

    rich_handler = RichHandler(
        console=console,
        show_time=show_time,
        show_path=show_path,
        enable_link_path=enable_link_path,
        rich_tracebacks=True,
        tracebacks_show_locals=level <= logging.DEBUG,
        markup=False,
    )
    rich_handler.setLevel(level)
    rich_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    handlers: list[logging.Handler] = [rich_handler]

    root_level = level
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(min(level, logging.INFO))
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        handlers.append(file_handler)
        root_level = min(level, logging.INFO)

    logging.basicConfig(
        level=root_level,
        handlers=handlers,
        force=True,
    )


def get_console(stderr: bool = False) -> Console:
    """Get a Rich Console instance.

    Args:
        stderr: Output to stderr instead of stdout

    Returns:
        Rich Console instance
    """
    if stderr:
        return console
    return Console(theme=QDAVAULT_THEME)


def print_error(message: str, console_obj: Console | None = None) -> None:
    """Print error message in red.

    Args:
        message: Error message to print
        console_obj: Optional console instance (uses global if None)
    """
    c = console_obj or console
    c.print(f"[error]✗ {message}[/error]")


def print_success(message: str, console_obj: Console | None = None) -> None:
    """Print success message in green.

    Args:
        message: Success message to print
        console_obj: Optional console instance (uses global if None)
    """
    c = console_obj or console
    c.print(f"[success]✓ {message}[/success]")


def print_warning(message: str, console_obj: Console | None = None) -> None:
    """Print warning message in yellow.

    Args:
        message: Warning message to print
        console_obj: Optional console instance (uses global if None)
    """
    c = console_obj or console
    c.print(f"[warning]⚠ {message}[/warning]")


def print_info(message: str, console_obj: Console | None = None) -> None:
    """Print info message in cyan.

    Args:
        message: Info message to print
        console_obj: Optional console instance (uses global if None)
    """
    c = console_obj or console
    c.print(f"[info]{message}[/info]")
