"""Parser for FILE:REFS line references.

This module turns user input like ``config.nix:-10,12..14`` into structured
FileSelection objects.

Syntax (one group per command-line argument):

- ``N``       addition at new line N
- ``-N``      deletion of old line N
- ``N..M``    range of additions (inclusive)
- ``-N..-M``  range of deletions (inclusive)
- ``A,B,C``   any combination of the above

Ranges are kept as spans (see LineSet), and duplicates and overlaps collapse.
A reversed range (``15..10``) is normalized rather than rejected.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

from gitlines.core.errors import (
    EmptyFileNameError,
    EmptyRefsError,
    InvalidFormatError,
    InvalidLineNumberError,
    MixedRangeError,
)
from gitlines.patch.types import FileSelection, LineKind, LineSet

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"^(-?)(\d+)$")


@dataclass(frozen=True)
class LineRange:
    """A closed range of addition or deletion line numbers."""

    kind: LineKind
    start: int
    end: int

    @property
    def span(self) -> tuple[int, int]:
        return (self.start, self.end)


def _parse_number(text: str, input: str) -> tuple[LineKind, int]:
    """Parse 'N' or '-N' into (kind, number)."""
    match = _NUMBER_RE.match(text.strip())
    if not match:
        raise InvalidLineNumberError(text.strip(), input)
    number = int(match.group(2))
    if number == 0:
        raise InvalidLineNumberError(text.strip(), input)
    kind = LineKind.DELETION if match.group(1) else LineKind.ADDITION
    return kind, number


def parse_selector(text: str, input: str = "") -> LineRange:
    """Parse a single selector (number, deletion or range) into a LineRange.

    Args:
        text: One comma-separated item, e.g. ``"12"``, ``"-3"``, ``"40..45"``
        input: Full reference, used in error messages

    Raises:
        InvalidLineNumberError: Zero, empty or non-numeric bound
        MixedRangeError: Range mixing an addition and a deletion bound
    """
    if ".." in text:
        start_text, _, end_text = text.partition("..")
        start_kind, start = _parse_number(start_text, input)
        end_kind, end = _parse_number(end_text, input)
        if start_kind is not end_kind:
            raise MixedRangeError(text.strip(), input)
        if start > end:
            logger.debug("Normalizing reversed range %s", text.strip())
            start, end = end, start
        return LineRange(start_kind, start, end)

    kind, number = _parse_number(text, input)
    return LineRange(kind, number, number)


def _normalize_path(path: str) -> str:
    path = path.strip()
    while path.startswith("./"):
        path = path[2:]
    return path


def parse_file_refs(input: str) -> FileSelection:
    """Parse one ``FILE:REFS`` group into a FileSelection.

    The path is everything before the last ':' (selectors never contain one).

    Example:
        >>> sel = parse_file_refs("gtk.nix:-10,-11,12")
        >>> sorted(sel.deletions), sorted(sel.additions)
        ([10, 11], [12])

    Raises:
        InvalidFormatError: No ':' separator
        EmptyFileNameError: Path is empty or whitespace
        EmptyRefsError: Nothing after the ':'
        InvalidLineNumberError: Zero or non-numeric line number
        MixedRangeError: Range with mismatched signs
    """
    path, sep, refs_text = input.rpartition(":")
    if not sep:
        raise InvalidFormatError(input)

    path = _normalize_path(path)
    if not path:
        raise EmptyFileNameError(input)

    additions: list[tuple[int, int]] = []
    deletions: list[tuple[int, int]] = []
    items = [item for item in refs_text.split(",") if item.strip()]
    if not items:
        raise EmptyRefsError(input)

    for item in items:
        line_range = parse_selector(item, input)
        target = deletions if line_range.kind is LineKind.DELETION else additions
        target.append(line_range.span)

    return FileSelection(
        path=path,
        additions=LineSet.from_spans(additions),
        deletions=LineSet.from_spans(deletions),
    )


def parse_references(groups: Iterable[str]) -> list[FileSelection]:
    """Parse several ``FILE:REFS`` groups, merging groups that name the same file.

    Returns:
        One FileSelection per distinct path, in first-seen order.
    """
    merged: dict[str, FileSelection] = {}
    for group in groups:
        selection = parse_file_refs(group)
        if selection.path in merged:
            merged[selection.path] = merged[selection.path].merge(selection)
        else:
            merged[selection.path] = selection
    return list(merged.values())
