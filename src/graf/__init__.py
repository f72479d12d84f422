"""graf - write/read API for a labeled, undirected graph."""

from .cli import cli


def main() -> None:
    """Entry point for the CLI application."""
    cli()
