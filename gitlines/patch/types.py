"""Types for the line-level staging pipeline.

This module provides dataclasses for the three stages of a staging run:
the parsed diff (Diff, FileDiff, Hunk, Line), the user's selection
(LineRef, LineSet, FileSelection) and the resolved selection that the patch
builder turns back into diff text (SelectedGroup, ResolvedFile, OutputHunk).
"""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum


class LineKind(Enum):
    """Kind of a physical diff line, keyed by its prefix character."""

    ADDITION = "+"
    DELETION = "-"
    CONTEXT = " "

    @property
    def prefix(self) -> str:
        return self.value


@dataclass(frozen=True)
class Line:
    """One physical diff line.

    Attributes:
        kind: Addition, deletion or context
        content: Line text without the prefix character or line terminator
        old_lineno: Position in the old file (deletions and context)
        new_lineno: Position in the new file (additions and context)
        no_newline: True if a '\\ No newline at end of file' marker follows
    """

    kind: LineKind
    content: str
    old_lineno: int | None = None
    new_lineno: int | None = None
    no_newline: bool = False

    @property
    def number(self) -> int:
        """Line number in the line's own numbering space."""
        if self.kind is LineKind.ADDITION:
            assert self.new_lineno is not None
            return self.new_lineno
        assert self.old_lineno is not None
        return self.old_lineno

    @property
    def is_old_side(self) -> bool:
        """True for lines present in the old file (deletions and context)."""
        return self.kind is not LineKind.ADDITION


@dataclass
class Hunk:
    """A single hunk of a unified diff.

    With zero context lines every hunk contains only changed lines, all
    deletions first and then all additions.

    Attributes:
        old_start: Header start in the old file. For old_count == 0 this is
            the line the additions follow (0 = start of file).
        old_count: Number of old-side lines (context + deletions)
        new_start: Header start in the new file
        new_count: Number of new-side lines (context + additions)
        lines: Body lines in diff order
        section: Optional heading text after the closing '@@'
    """

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: list[Line] = field(default_factory=list)
    section: str = ""

    @property
    def deletions(self) -> list[Line]:
        return [line for line in self.lines if line.kind is LineKind.DELETION]

    @property
    def additions(self) -> list[Line]:
        return [line for line in self.lines if line.kind is LineKind.ADDITION]

    @property
    def old_lines(self) -> list[Line]:
        """Lines that exist in the old file (deletions and context)."""
        return [line for line in self.lines if line.is_old_side]

    @property
    def old_end(self) -> int:
        """Last old-file line covered by this hunk (old_start for pure insertions)."""
        if self.old_count == 0:
            return self.old_start
        return self.old_start + self.old_count - 1


@dataclass
class FileDiff:
    """All hunks for a single file.

    Attributes:
        old_path: Path before the change (None for /dev/null)
        new_path: Path after the change (None for /dev/null)
        hunks: Hunks sorted by old_start, non-overlapping
        headers: Extended git header lines (index, mode, ...) in source order
        is_binary: True if git reported the file as binary
    """

    old_path: str | None
    new_path: str | None
    hunks: list[Hunk] = field(default_factory=list)
    headers: list[str] = field(default_factory=list)
    is_binary: bool = False

    @property
    def path(self) -> str:
        """Effective path: new_path for edits/creates, old_path for deletes."""
        path = self.new_path if self.new_path is not None else self.old_path
        assert path is not None
        return path

    @property
    def is_new_file(self) -> bool:
        return self.old_path is None

    @property
    def is_deleted(self) -> bool:
        return self.new_path is None


@dataclass
class Diff:
    """A parsed multi-file diff, keyed by effective file path in diff order."""

    files: dict[str, FileDiff] = field(default_factory=dict)

    def get_file(self, path: str) -> FileDiff | None:
        """Get the diff for a path, matching either side of a rename."""
        if path in self.files:
            return self.files[path]
        for file_diff in self.files.values():
            if path in (file_diff.old_path, file_diff.new_path):
                return file_diff
        return None

    def __len__(self) -> int:
        return len(self.files)


@dataclass(frozen=True)
class LineRef:
    """A single selected line: an addition (new-file number) or a deletion (old-file number)."""

    kind: LineKind
    number: int

    def __str__(self) -> str:
        if self.kind is LineKind.DELETION:
            return f"-{self.number}"
        return str(self.number)


@dataclass(frozen=True)
class LineSet:
    """Selected line numbers of one kind, held as sorted, disjoint closed spans.

    A range selector stays a single span however wide it is; the resolver
    only ever tests membership for line numbers that appear in the diff.
    """

    spans: tuple[tuple[int, int], ...] = ()

    @classmethod
    def from_spans(cls, spans: Iterable[tuple[int, int]]) -> LineSet:
        """Build a LineSet, merging overlapping and adjacent spans."""
        merged: list[list[int]] = []
        for start, end in sorted(spans):
            if merged and start <= merged[-1][1] + 1:
                merged[-1][1] = max(merged[-1][1], end)
            else:
                merged.append([start, end])
        return cls(tuple((start, end) for start, end in merged))

    @classmethod
    def of(cls, *numbers: int) -> LineSet:
        return cls.from_spans((number, number) for number in numbers)

    def __contains__(self, number: object) -> bool:
        if not isinstance(number, int):
            return False
        index = bisect_right(self.spans, number, key=lambda span: span[0]) - 1
        return index >= 0 and number <= self.spans[index][1]

    def __iter__(self) -> Iterator[int]:
        for start, end in self.spans:
            yield from range(start, end + 1)

    def __len__(self) -> int:
        return sum(end - start + 1 for start, end in self.spans)

    def __bool__(self) -> bool:
        return bool(self.spans)

    def __or__(self, other: LineSet) -> LineSet:
        return LineSet.from_spans(self.spans + other.spans)

    def without(self, numbers: Iterable[int]) -> LineSet:
        """The spans that remain once the given numbers are removed."""
        removed = sorted(set(numbers))
        remaining: list[tuple[int, int]] = []
        i = 0
        for start, end in self.spans:
            while i < len(removed) and removed[i] < start:
                i += 1
            cursor = start
            while i < len(removed) and removed[i] <= end:
                if removed[i] > cursor:
                    remaining.append((cursor, removed[i] - 1))
                cursor = removed[i] + 1
                i += 1
            if cursor <= end:
                remaining.append((cursor, end))
        return LineSet(tuple(remaining))

    def format(self, sign: str = "") -> list[str]:
        """Selector text per span: ``12``, ``40..45``, or with sign="-", ``-10..-11``."""
        return [
            f"{sign}{start}" if start == end else f"{sign}{start}..{sign}{end}"
            for start, end in self.spans
        ]


@dataclass(frozen=True)
class FileSelection:
    """The deduplicated selectors for one file.

    Attributes:
        path: Repository path as typed by the user (normalized)
        additions: Selected new-file line numbers
        deletions: Selected old-file line numbers
    """

    path: str
    additions: LineSet = LineSet()
    deletions: LineSet = LineSet()

    def selects(self, ref: LineRef) -> bool:
        """True if ref is one of the selected lines."""
        if ref.kind is LineKind.DELETION:
            return ref.number in self.deletions
        return ref.number in self.additions

    def merge(self, other: FileSelection) -> FileSelection:
        """Union of two selections for the same path."""
        return FileSelection(
            path=self.path,
            additions=self.additions | other.additions,
            deletions=self.deletions | other.deletions,
        )

    def __str__(self) -> str:
        selectors = self.deletions.format("-") + self.additions.format()
        return f"{self.path}:{','.join(selectors)}"


@dataclass
class SelectedGroup:
    """The selected lines of one source hunk, ready to be re-emitted.

    Attributes:
        hunk: Source hunk the lines came from
        old_lines: Old-side lines to emit as deletions, ascending (selected
            deletions plus gap and bridge lines)
        new_lines: Lines to emit as additions, in order (re-added gap lines,
            the synthesized bridge line, then selected additions)
        anchor: Old line the additions follow when old_lines is empty
        bridged: True if a no-newline bridge pair was added
    """

    hunk: Hunk
    old_lines: list[Line] = field(default_factory=list)
    new_lines: list[Line] = field(default_factory=list)
    anchor: int = 0
    bridged: bool = False

    @property
    def old_start(self) -> int:
        if self.old_lines:
            return self.old_lines[0].number
        return self.anchor

    @property
    def old_count(self) -> int:
        return len(self.old_lines)

    @property
    def new_count(self) -> int:
        return len(self.new_lines)

    @property
    def old_end(self) -> int:
        """Last old line consumed (the anchor for pure insertions)."""
        if self.old_lines:
            return self.old_lines[-1].number
        return self.anchor


@dataclass
class ResolvedFile:
    """A file's selection resolved against its FileDiff."""

    file_diff: FileDiff
    groups: list[SelectedGroup] = field(default_factory=list)

    @property
    def path(self) -> str:
        return self.file_diff.path


@dataclass
class OutputHunk:
    """A hunk of the rebuilt patch with recomputed positions."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    deletions: list[Line] = field(default_factory=list)
    additions: list[Line] = field(default_factory=list)

    @property
    def header(self) -> str:
        old_range = _format_range(self.old_start, self.old_count)
        new_range = _format_range(self.new_start, self.new_count)
        return f"@@ -{old_range} +{new_range} @@"


def _format_range(start: int, count: int) -> str:
    """Format a hunk range the way git does: count 1 omitted, count 0 explicit."""
    if count == 1:
        return str(start)
    return f"{start},{count}"
