"""pywise CLI - Command line interface for pywise."""

from pywise.cli.commands import cli
from pywise.cli.output import TableOutput


def main() -> None:
    """Main entry point for the pywise CLI."""
    cli()


__all__ = ["main", "cli", "TableOutput"]
