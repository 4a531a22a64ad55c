"""Command-line interface for git-lines."""

from gitlines.cli.main import configure_logging, main

__all__ = ["configure_logging", "main"]
