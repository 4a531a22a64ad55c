"""Build unified diff text from resolved selections.

The builder turns each SelectedGroup into an OutputHunk with a freshly
computed new-side position, then renders one ``diff --git`` block per file.
Positions follow the operation class of each hunk:

- pure addition: ``new_start = old_start + 1``
- pure deletion: ``new_start = old_start - 1``
- mixed:         ``new_start = old_start``

plus the net line change of every earlier hunk of the same file, since the
index sees the hunks applied in order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from gitlines.core.constants import NO_NEWLINE_MARKER
from gitlines.core.errors import OverlappingGroupsError
from gitlines.patch.quoting import prefixed
from gitlines.patch.types import Line, OutputHunk, ResolvedFile, SelectedGroup

logger = logging.getLogger(__name__)


def _group_sort_key(group: SelectedGroup) -> tuple[int, int]:
    # A pure insertion after line N goes after a group starting at N
    return (group.old_start, 0 if group.old_count else 1)


def _check_overlap(path: str, prev: SelectedGroup, nxt: SelectedGroup) -> None:
    prev_end = prev.old_end
    if nxt.old_count > 0:
        overlaps = prev_end >= nxt.old_start
    else:
        overlaps = prev_end > nxt.old_start
    if overlaps:
        raise OverlappingGroupsError(path, prev.old_start, nxt.old_start)


def _new_start(old_start: int, old_count: int, new_count: int) -> int:
    if old_count == 0:
        return old_start + 1
    if new_count == 0:
        return old_start - 1
    return old_start


def build_output_hunks(resolved: ResolvedFile) -> list[OutputHunk]:
    """Compute the output hunks of one file in old-file order.

    Raises:
        OverlappingGroupsError: Two groups cover the same old lines
    """
    ordered = sorted(resolved.groups, key=_group_sort_key)
    hunks: list[OutputHunk] = []
    delta = 0
    prev: SelectedGroup | None = None

    for group in ordered:
        if prev is not None:
            _check_overlap(resolved.path, prev, group)
        prev = group

        old_start = group.old_start
        old_count = group.old_count
        new_count = group.new_count
        hunks.append(
            OutputHunk(
                old_start=old_start,
                old_count=old_count,
                new_start=_new_start(old_start, old_count, new_count) + delta,
                new_count=new_count,
                deletions=list(group.old_lines),
                additions=list(group.new_lines),
            )
        )
        delta += new_count - old_count

    return hunks


def _render_lines(prefix: str, lines: list[Line]) -> list[str]:
    out: list[str] = []
    for line in lines:
        out.append(prefix + line.content)
        if line.no_newline:
            out.append(NO_NEWLINE_MARKER)
    return out


def build_file_patch(resolved: ResolvedFile) -> str:
    """Render the patch block for one file, or "" if it has nothing selected."""
    hunks = build_output_hunks(resolved)
    if not hunks:
        return ""

    file_diff = resolved.file_diff
    # /dev/null sides are written as the path itself; the index entry exists
    old_path = resolved.path if file_diff.is_new_file else file_diff.old_path
    new_path = resolved.path if file_diff.is_deleted else file_diff.new_path

    out = [
        f"diff --git {prefixed('a/', old_path)} {prefixed('b/', new_path)}",
        f"--- {prefixed('a/', old_path)}",
        f"+++ {prefixed('b/', new_path)}",
    ]
    for hunk in hunks:
        out.append(hunk.header)
        out.extend(_render_lines("-", hunk.deletions))
        out.extend(_render_lines("+", hunk.additions))

    return "\n".join(out) + "\n"


def build_patch(resolved_files: Iterable[ResolvedFile]) -> str:
    """Build one combined patch for several files, in lexicographic path order.

    The result is independent of the order in which files and selectors were
    given, so equal selections always produce byte-identical patches.
    """
    ordered = sorted(resolved_files, key=lambda resolved: resolved.path)
    patch = "".join(build_file_patch(resolved) for resolved in ordered)
    logger.debug("Built patch for %d file(s), %d chars", len(ordered), len(patch))
    return patch
