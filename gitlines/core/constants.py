"""Core constants and paths for git-lines.

Single source of truth for config locations. All modules should import from
here instead of hardcoding paths like `Path.home() / ".gitlines"`.
"""

from pathlib import Path

VERSION = "0.1.0"

GITLINES_DIR_NAME = ".gitlines"
CONFIG_FILE_NAME = "config.json"

# Literal marker git writes after a line that lacks a trailing newline
NO_NEWLINE_MARKER = "\\ No newline at end of file"


def get_gitlines_dir() -> Path:
    """Get ~/.gitlines (global config directory)."""
    return Path.home() / GITLINES_DIR_NAME


def get_global_config_path() -> Path:
    """Get the global config file path."""
    return get_gitlines_dir() / CONFIG_FILE_NAME


def get_local_config_path(repo_path: Path) -> Path:
    """Get the repository-local config file path."""
    return repo_path / GITLINES_DIR_NAME / CONFIG_FILE_NAME
