"""qdavault - Restore QDA backup bundles into a fresh installation."""

__version__ = "0.1.0"


def main() -> None:
    """Main entry point for the CLI."""
    from qdavault.cli.main import app

    app()
