"""Core errors, constants and encoding helpers."""

from gitlines.core.encoding import ENCODING, ENCODING_ERRORS, configure_stdio
from gitlines.core.errors import (
    ConfigError,
    DiffError,
    GitCommandError,
    GitLinesError,
    NoChangesError,
    NoMatchingLinesError,
    ParseError,
    PatchError,
    SelectionError,
)

__all__ = [
    "ENCODING",
    "ENCODING_ERRORS",
    "configure_stdio",
    "GitLinesError",
    "ConfigError",
    "ParseError",
    "DiffError",
    "SelectionError",
    "NoChangesError",
    "NoMatchingLinesError",
    "PatchError",
    "GitCommandError",
]
