"""Parser for zero-context unified diff text.

This module turns the output of ``git diff -U0`` into structured Diff,
FileDiff, Hunk and Line objects. It is a small recursive-descent parser over
a line cursor: a diff is a sequence of file blocks, a file block is a header
followed by hunks, and a hunk is a header followed by exactly as many body
lines as its counts promise.
"""

from __future__ import annotations

import dataclasses
import logging
import re

from gitlines.core.errors import (
    DiffError,
    HunkCountMismatchError,
    MalformedHunkHeaderError,
    MissingFileHeaderError,
    OverlappingHunksError,
)
from gitlines.patch.quoting import unquote_path
from gitlines.patch.types import Diff, FileDiff, Hunk, Line, LineKind

logger = logging.getLogger(__name__)

# Pattern for hunk header: @@ -old_start[,old_count] +new_start[,new_count] @@ [section]
HUNK_HEADER_RE = re.compile(
    r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@(.*)$"
)

DEV_NULL = "/dev/null"
GIT_HEADER_PREFIX = "diff --git "


class _Cursor:
    """Read position over the lines of a diff."""

    def __init__(self, lines: list[str]) -> None:
        self._lines = lines
        self._index = 0

    @property
    def line_number(self) -> int:
        """1-based number of the line peek() would return."""
        return self._index + 1

    def at_end(self) -> bool:
        return self._index >= len(self._lines)

    def peek(self, offset: int = 0) -> str | None:
        index = self._index + offset
        if index < len(self._lines):
            return self._lines[index]
        return None

    def advance(self) -> str:
        line = self._lines[self._index]
        self._index += 1
        return line


def _split_lines(text: str) -> list[str]:
    # Only "\n" terminates a line; a "\r" belongs to the content.
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _strip_path_prefix(path: str) -> str:
    """Strip a/ or b/ prefix from path if present."""
    if path.startswith("a/") or path.startswith("b/"):
        return path[2:]
    return path


def _parse_header_path(text: str) -> str | None:
    """Parse the path of a '---' or '+++' line, returning None for /dev/null."""
    # Anything after a tab is a timestamp or padding, never part of the name.
    name = text.split("\t", 1)[0]
    if name == DEV_NULL:
        return None
    return _strip_path_prefix(unquote_path(name))


def _split_git_header(rest: str) -> tuple[str, str] | None:
    """Split 'a/X b/Y' from a 'diff --git' line into its two raw names."""
    if rest.startswith('"'):
        i = 1
        while i < len(rest):
            if rest[i] == "\\":
                i += 2
                continue
            if rest[i] == '"':
                return rest[: i + 1], rest[i + 2 :]
            i += 1
        return None

    # Unquoted names may contain spaces; for an edit both halves match.
    half = (len(rest) - 1) // 2
    old, new = rest[:half], rest[half + 1 :]
    if rest[half : half + 1] == " " and old[2:] == new[2:]:
        return old, new

    old, sep, new = rest.rpartition(" b/")
    if sep:
        return old, "b/" + new
    old, sep, new = rest.rpartition(' "b/')
    if sep:
        return old, '"b/' + new
    return None


def _is_file_header(cursor: _Cursor) -> bool:
    """True if the cursor is at a '--- ' line followed by a '+++ ' line."""
    line = cursor.peek()
    following = cursor.peek(1)
    return (
        line is not None
        and line.startswith("--- ")
        and following is not None
        and following.startswith("+++ ")
    )


def _is_block_start(cursor: _Cursor) -> bool:
    line = cursor.peek()
    if line is None:
        return False
    return line.startswith(GIT_HEADER_PREFIX) or _is_file_header(cursor)


def _parse_hunk_header(line: str, line_number: int) -> Hunk:
    """Parse a hunk header line into an empty Hunk.

    Raises:
        MalformedHunkHeaderError: If the line does not match the @@ grammar.
    """
    match = HUNK_HEADER_RE.match(line)
    if not match:
        raise MalformedHunkHeaderError(line, line_number)

    # Count defaults to 1 if omitted (e.g., @@ -1 +1,2 @@)
    return Hunk(
        old_start=int(match.group(1)),
        old_count=int(match.group(2)) if match.group(2) is not None else 1,
        new_start=int(match.group(3)),
        new_count=int(match.group(4)) if match.group(4) is not None else 1,
        lines=[],
        section=match.group(5).strip(),
    )


def _mark_no_newline(lines: list[Line], line_number: int) -> None:
    if not lines:
        raise DiffError("'\\ No newline at end of file' without a preceding line", line_number)
    lines[-1] = dataclasses.replace(lines[-1], no_newline=True)


def _parse_hunk(cursor: _Cursor) -> Hunk:
    """Parse one hunk: its header plus exactly old_count/new_count body lines."""
    header_number = cursor.line_number
    header = cursor.advance()
    hunk = _parse_hunk_header(header, header_number)

    old_remaining = hunk.old_count
    new_remaining = hunk.new_count
    old_lineno = hunk.old_start
    new_lineno = hunk.new_start

    while old_remaining > 0 or new_remaining > 0:
        line = cursor.peek()
        if line is None:
            raise HunkCountMismatchError(
                f"Hunk {header!r} ended early: expected {old_remaining} more old "
                f"and {new_remaining} more new lines",
                cursor.line_number,
            )

        if line.startswith("\\"):
            _mark_no_newline(hunk.lines, cursor.line_number)
            cursor.advance()
            continue

        prefix, content = line[:1], line[1:]
        if prefix == "-" and old_remaining > 0:
            hunk.lines.append(Line(LineKind.DELETION, content, old_lineno=old_lineno))
            old_lineno += 1
            old_remaining -= 1
        elif prefix == "+" and new_remaining > 0:
            hunk.lines.append(Line(LineKind.ADDITION, content, new_lineno=new_lineno))
            new_lineno += 1
            new_remaining -= 1
        elif prefix in (" ", "") and old_remaining > 0 and new_remaining > 0:
            hunk.lines.append(
                Line(LineKind.CONTEXT, content, old_lineno=old_lineno, new_lineno=new_lineno)
            )
            old_lineno += 1
            new_lineno += 1
            old_remaining -= 1
            new_remaining -= 1
        else:
            raise HunkCountMismatchError(
                f"Hunk {header!r} expects {old_remaining} more old and "
                f"{new_remaining} more new lines, found {line!r}",
                cursor.line_number,
            )
        cursor.advance()

    # A marker for the final body line follows the counted lines
    line = cursor.peek()
    if line is not None and line.startswith("\\"):
        _mark_no_newline(hunk.lines, cursor.line_number)
        cursor.advance()

    line = cursor.peek()
    if line and line[0] in "+- " and not _is_file_header(cursor):
        raise HunkCountMismatchError(
            f"Hunk {header!r} has more lines than its header counts", cursor.line_number
        )

    return hunk


def _check_hunk_order(path: str, hunks: list[Hunk]) -> list[Hunk]:
    """Sort hunks by old position and reject overlaps.

    A pure insertion at N sits between old lines N and N+1, so it sorts after
    a hunk that starts at N.
    """
    ordered = sorted(hunks, key=lambda h: (h.old_start, 0 if h.old_count else 1))
    for prev, nxt in zip(ordered, ordered[1:]):
        prev_end = prev.old_end
        if nxt.old_count > 0:
            overlaps = prev_end >= nxt.old_start
        else:
            overlaps = prev_end > nxt.old_start
        if overlaps:
            raise OverlappingHunksError(
                f"Overlapping hunks in {path}: old line {prev.old_start} "
                f"and old line {nxt.old_start}"
            )
    return ordered


def _parse_file_block(cursor: _Cursor) -> FileDiff:
    """Parse one file block: optional git header, extended headers, ---/+++ and hunks."""
    old_path: str | None = None
    new_path: str | None = None
    headers: list[str] = []
    is_binary = False

    line = cursor.peek()
    assert line is not None
    if line.startswith(GIT_HEADER_PREFIX):
        header_number = cursor.line_number
        cursor.advance()
        names = _split_git_header(line[len(GIT_HEADER_PREFIX) :])
        if names is None:
            raise MissingFileHeaderError(f"Unparseable file header: {line!r}", header_number)
        old_path = _strip_path_prefix(unquote_path(names[0]))
        new_path = _strip_path_prefix(unquote_path(names[1]))

        # Extended headers run until the ---/+++ pair, a hunk or the next block
        while True:
            line = cursor.peek()
            if line is None or line.startswith(("@@", GIT_HEADER_PREFIX)) or _is_file_header(cursor):
                break
            headers.append(cursor.advance())
            if line.startswith("Binary files ") or line == "GIT binary patch":
                is_binary = True
            elif line.startswith("new file mode"):
                old_path = None
            elif line.startswith("deleted file mode"):
                new_path = None

    if _is_file_header(cursor):
        old_path = _parse_header_path(cursor.advance()[4:])
        new_path = _parse_header_path(cursor.advance()[4:])
    elif cursor.peek() is not None and cursor.peek().startswith("@@"):
        raise MissingFileHeaderError("Hunk without '---'/'+++' file header", cursor.line_number)

    if old_path is None and new_path is None:
        raise MissingFileHeaderError("File block names no path", cursor.line_number)

    hunks: list[Hunk] = []
    while (line := cursor.peek()) is not None and line.startswith("@@"):
        hunks.append(_parse_hunk(cursor))

    file_diff = FileDiff(
        old_path=old_path,
        new_path=new_path,
        hunks=[],
        headers=headers,
        is_binary=is_binary,
    )
    file_diff.hunks = _check_hunk_order(file_diff.path, hunks)

    if not hunks:
        logger.debug("File block for %s has no hunks", file_diff.path)
    return file_diff


def parse_diff(text: str) -> Diff:
    """Parse zero-context unified diff text into a Diff.

    Handles both the git extended format (``diff --git`` with extended
    headers) and plain ``---``/``+++`` blocks, C-quoted paths, ``/dev/null``
    sides and ``\\ No newline at end of file`` markers.

    Args:
        text: Diff text, typically ``git diff -U0`` output

    Returns:
        Diff keyed by effective path in input order. Empty or
        whitespace-only input yields an empty Diff.

    Raises:
        MalformedHunkHeaderError: An @@ line does not parse
        HunkCountMismatchError: Body lines disagree with the header counts
        MissingFileHeaderError: Hunk or text outside a file block
        OverlappingHunksError: Hunks of one file overlap
        DiffError: Any other structural problem

    Example:
        >>> diff = parse_diff('''--- a/foo.txt
        ... +++ b/foo.txt
        ... @@ -1,0 +2 @@
        ... +new line
        ... ''')
        >>> diff.get_file("foo.txt").hunks[0].additions[0].new_lineno
        2
    """
    diff = Diff()
    if not text.strip():
        return diff

    cursor = _Cursor(_split_lines(text))
    while not cursor.at_end():
        line = cursor.peek()
        assert line is not None
        if _is_block_start(cursor):
            file_diff = _parse_file_block(cursor)
            if file_diff.path in diff.files:
                raise DiffError(f"Duplicate diff for {file_diff.path}", cursor.line_number)
            diff.files[file_diff.path] = file_diff
        elif not line.strip():
            cursor.advance()
        elif line.startswith("@@"):
            raise MissingFileHeaderError("Hunk without file header", cursor.line_number)
        else:
            raise MissingFileHeaderError(
                f"Unexpected text outside a file block: {line!r}", cursor.line_number
            )

    logger.debug("Parsed diff with %d file(s)", len(diff))
    return diff
