"""Typed exception hierarchy for git-lines.

Each pipeline stage owns one base class (reference parsing, diff parsing,
selection, patch building, git execution, configuration). Every base derives
from GitLinesError so the CLI can report any failure the same way.
"""

from __future__ import annotations

from collections.abc import Sequence


class GitLinesError(Exception):
    """Base class for all git-lines errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigError(GitLinesError):
    """Raised for configuration issues (missing file, invalid JSON, validation failure)."""


class LoadError(GitLinesError):
    """Raised when a JSON file cannot be read or decoded."""


# === Reference parsing ===


class ParseError(GitLinesError):
    """Malformed FILE:REFS reference syntax."""

    def __init__(self, message: str, input: str = "") -> None:
        self.input = input
        super().__init__(message)


class InvalidFormatError(ParseError):
    """Reference has no ':' separating the path from its selectors."""

    def __init__(self, input: str) -> None:
        super().__init__(f"Invalid format '{input}': expected 'file:refs'", input)


class EmptyFileNameError(ParseError):
    """Path portion before the ':' is empty or whitespace."""

    def __init__(self, input: str) -> None:
        super().__init__(f"Invalid format '{input}': file name cannot be empty", input)


class EmptyRefsError(ParseError):
    """No selectors follow the ':'."""

    def __init__(self, input: str) -> None:
        super().__init__(f"No line references provided in '{input}'", input)


class InvalidLineNumberError(ParseError):
    """A selector number is zero, negative where not allowed, or not a number."""

    def __init__(self, value: str, input: str = "") -> None:
        self.value = value
        super().__init__(f"Invalid line number '{value}'", input)


class MixedRangeError(ParseError):
    """A range mixes an addition bound with a deletion bound."""

    def __init__(self, value: str, input: str = "") -> None:
        self.value = value
        super().__init__(
            f"Invalid range '{value}': both ends must be additions (N..M) "
            f"or both deletions (-N..-M)",
            input,
        )


# === Diff parsing ===


class DiffError(GitLinesError):
    """Malformed or unparseable diff text."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class MalformedHunkHeaderError(DiffError):
    """An @@ line does not match '@@ -a[,b] +c[,d] @@'."""

    def __init__(self, header: str, line_number: int | None = None) -> None:
        self.header = header
        super().__init__(f"Malformed hunk header: {header!r}", line_number)


class HunkCountMismatchError(DiffError):
    """Hunk header counts disagree with the content lines present."""


class MissingFileHeaderError(DiffError):
    """Hunk or content appears without a file header."""


class OverlappingHunksError(DiffError):
    """Two hunks of the same file cover overlapping old-file ranges."""


# === Selection ===


class SelectionError(GitLinesError):
    """A well-formed selection does not correspond to the current diff."""

    def __init__(self, message: str, file: str) -> None:
        self.file = file
        super().__init__(message)


class NoChangesError(SelectionError):
    """The selected file has no unstaged changes at all."""

    def __init__(self, file: str) -> None:
        super().__init__(f"No changes found in {file}", file)


class NoMatchingLinesError(SelectionError):
    """Some requested line numbers are not changed lines in the current diff."""

    def __init__(self, file: str, refs: Sequence[str] = ()) -> None:
        self.refs = list(refs)
        detail = f": {', '.join(self.refs)}" if self.refs else ""
        super().__init__(f"No matching lines found for {file}{detail}", file)


# === Patch building ===


class PatchError(GitLinesError):
    """Internal inconsistency while constructing a patch."""


class OverlappingGroupsError(PatchError):
    """Two selected groups of one file would overlap in the output patch."""

    def __init__(self, file: str, first: int, second: int) -> None:
        self.file = file
        super().__init__(
            f"Selected changes in {file} overlap "
            f"(group at old line {first} runs into group at old line {second})"
        )


# === Git execution ===


class GitCommandError(GitLinesError):
    """The git executable is missing, failed, or reported a conflict."""


class GitNotFoundError(GitCommandError):
    """The git executable could not be started."""

    def __init__(self, executable: str, reason: str) -> None:
        self.executable = executable
        super().__init__(f"Failed to run {executable}: {reason}")


class GitExitError(GitCommandError):
    """A git command exited with a non-zero status."""

    def __init__(self, command: str, returncode: int, stderr: str) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or f"exit status {returncode}"
        super().__init__(f"git {command} failed: {detail}")


class IndexLockError(GitExitError):
    """git apply could not take the index lock."""


class GitTimeoutError(GitCommandError):
    """A git command exceeded the configured timeout."""

    def __init__(self, command: str, timeout: float) -> None:
        self.command = command
        self.timeout = timeout
        super().__init__(f"git {command} timed out after {timeout:g}s")
