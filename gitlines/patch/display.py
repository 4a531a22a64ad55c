"""Numbered, human-readable rendering of diffs and staged selections.

Output format, per file::

    flake.nix:
      -10:	old line
      +10:	new line

      +42:	another hunk

Deletions carry old-file numbers and additions new-file numbers, which are
exactly the numbers accepted by ``git-lines stage``. Hunks and files are
separated by a blank line.
"""

from __future__ import annotations

from collections.abc import Iterable

from gitlines.patch.builder import build_output_hunks
from gitlines.patch.types import Diff, Line, LineKind, ResolvedFile

# (kind, number, content) entries of one hunk
NumberedLines = list[tuple[LineKind, int, str]]


def format_line(kind: LineKind, number: int, content: str) -> str:
    return f"  {kind.prefix}{number}:\t{content}"


def _format_file(path: str, hunks: list[NumberedLines]) -> list[str]:
    out = [f"{path}:"]
    for index, hunk in enumerate(hunks):
        if index:
            out.append("")
        out.extend(format_line(kind, number, content) for kind, number, content in hunk)
    return out


def _format_files(files: Iterable[tuple[str, list[NumberedLines]]]) -> str:
    blocks = ["\n".join(_format_file(path, hunks)) for path, hunks in files if hunks]
    if not blocks:
        return ""
    return "\n\n".join(blocks) + "\n"


def _numbered(lines: list[Line]) -> NumberedLines:
    return [
        (line.kind, line.number, line.content)
        for line in lines
        if line.kind is not LineKind.CONTEXT
    ]


def format_diff(diff: Diff) -> str:
    """Render every changed line of the diff with its stageable number."""
    files = []
    for path, file_diff in diff.files.items():
        hunks = [_numbered(hunk.deletions + hunk.additions) for hunk in file_diff.hunks]
        files.append((path, hunks))
    return _format_files(files)


def format_selection(resolved_files: Iterable[ResolvedFile]) -> str:
    """Render what a patch stages, numbered as the lines land in the index.

    Bridge and re-added lines appear too, since they are part of the patch.
    """
    files = []
    for resolved in sorted(resolved_files, key=lambda r: r.path):
        hunks: list[NumberedLines] = []
        for hunk in build_output_hunks(resolved):
            numbered: NumberedLines = []
            for offset, line in enumerate(hunk.deletions):
                numbered.append((LineKind.DELETION, hunk.old_start + offset, line.content))
            for offset, line in enumerate(hunk.additions):
                numbered.append((LineKind.ADDITION, hunk.new_start + offset, line.content))
            hunks.append(numbered)
        files.append((resolved.path, hunks))
    return _format_files(files)
