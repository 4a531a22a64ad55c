"""Resolve line selections against a parsed diff.

For each FileSelection the resolver finds the concrete diff lines that the
user asked for and groups them by the hunk they came from. Each group is
shaped so that the patch builder can emit it as one valid zero-context hunk:

- Skipped old-side lines between two emitted ones are carried through as a
  deletion plus an identical re-addition (gap filling).
- When the hunk's last old-side line has no trailing newline and additions
  are staged after it, that line is deleted and re-added with a newline
  (no-newline bridging). Without this the first staged addition would be
  glued onto the unterminated line.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from gitlines.core.errors import NoChangesError, NoMatchingLinesError
from gitlines.patch.types import (
    Diff,
    FileSelection,
    Hunk,
    Line,
    LineKind,
    LineRef,
    ResolvedFile,
    SelectedGroup,
)

logger = logging.getLogger(__name__)


def _copy_as_addition(line: Line) -> Line:
    """A re-addition of an old-side line, always newline-terminated."""
    return Line(LineKind.ADDITION, line.content)


def _anchor(hunk: Hunk, first_addition: Line) -> int:
    """Old line after which the given addition lands in the source hunk."""
    before = hunk.old_start - 1 if hunk.old_count > 0 else hunk.old_start
    for line in hunk.lines:
        if line is first_addition:
            break
        if line.is_old_side:
            assert line.old_lineno is not None
            before = line.old_lineno
    return before


def _fill_gaps(hunk: Hunk, old_lines: list[Line]) -> tuple[list[Line], list[Line]]:
    """Close holes between emitted old-side lines.

    Returns:
        (old_lines, readded): the contiguous old-side run and the gap lines to
        re-add in their original order.
    """
    if len(old_lines) < 2:
        return old_lines, []

    first, last = old_lines[0].number, old_lines[-1].number
    emitted = {line.number for line in old_lines}
    run: list[Line] = []
    readded: list[Line] = []
    for line in hunk.old_lines:
        if first <= line.number <= last:
            run.append(line)
            if line.number not in emitted:
                readded.append(_copy_as_addition(line))
    return run, readded


def _build_group(hunk: Hunk, deletions: set[int], additions: set[int]) -> SelectedGroup:
    """Build the SelectedGroup for one source hunk."""
    old_side = hunk.old_lines
    hunk_additions = hunk.additions

    old_lines = [
        line for line in old_side
        if line.kind is LineKind.DELETION and line.number in deletions
    ]
    new_lines = [line for line in hunk_additions if line.number in additions]

    group = SelectedGroup(hunk=hunk)
    bridge: list[Line] = []

    last_old = old_side[-1] if old_side else None
    if (
        last_old is not None
        and last_old.no_newline
        and new_lines
        and last_old not in old_lines
    ):
        old_lines.append(last_old)
        group.bridged = True
        first_addition = hunk_additions[0]
        supplies_newline = (
            first_addition in new_lines and first_addition.content == last_old.content
        )
        if not supplies_newline:
            bridge.append(_copy_as_addition(last_old))
        logger.debug(
            "Bridging unterminated old line %d in hunk at %d",
            last_old.number,
            hunk.old_start,
        )

    old_lines, readded = _fill_gaps(hunk, old_lines)
    if readded:
        logger.debug("Re-adding %d skipped line(s) in hunk at %d", len(readded), hunk.old_start)

    group.old_lines = old_lines
    group.new_lines = readded + bridge + new_lines
    if not old_lines:
        group.anchor = _anchor(hunk, new_lines[0])
    return group


def resolve_selection(diff: Diff, selection: FileSelection) -> ResolvedFile:
    """Resolve one file's selection against the diff.

    Every requested reference must name an added line (by new-file number)
    or a deleted line (by old-file number) of the current diff.

    Raises:
        NoChangesError: The file is not in the diff or has no hunks
        NoMatchingLinesError: Some references match no changed line; the
            error lists them as selector spans (``-12``, ``20..25``)
    """
    file_diff = diff.get_file(selection.path)
    if file_diff is None or not file_diff.hunks:
        raise NoChangesError(selection.path)

    # Map every changed line to the index of its hunk
    owner: dict[LineRef, int] = {}
    for index, hunk in enumerate(file_diff.hunks):
        for line in hunk.lines:
            if line.kind is not LineKind.CONTEXT:
                owner[LineRef(line.kind, line.number)] = index

    # Ranges are never expanded: only numbers present in the diff are looked up
    old_numbers = [ref.number for ref in owner if ref.kind is LineKind.DELETION]
    new_numbers = [ref.number for ref in owner if ref.kind is LineKind.ADDITION]
    unmatched = (
        selection.deletions.without(old_numbers).format("-")
        + selection.additions.without(new_numbers).format()
    )
    if unmatched:
        raise NoMatchingLinesError(selection.path, unmatched)

    per_hunk: dict[int, tuple[set[int], set[int]]] = {}
    for ref, index in owner.items():
        if not selection.selects(ref):
            continue
        deletions, additions = per_hunk.setdefault(index, (set(), set()))
        if ref.kind is LineKind.DELETION:
            deletions.add(ref.number)
        else:
            additions.add(ref.number)

    groups = [
        _build_group(file_diff.hunks[index], *per_hunk[index])
        for index in sorted(per_hunk)
    ]
    logger.debug("Resolved %s into %d group(s)", selection, len(groups))
    return ResolvedFile(file_diff=file_diff, groups=groups)


def resolve_selections(diff: Diff, selections: Iterable[FileSelection]) -> list[ResolvedFile]:
    """Resolve every selection; any failure aborts before anything is returned."""
    return [resolve_selection(diff, selection) for selection in selections]
