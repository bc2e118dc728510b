"""Command-line interface for the Nebraska provider."""

from nebraska_provider.cli.main import cli, main

__all__ = ["cli", "main"]
