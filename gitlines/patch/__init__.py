"""Patch module for line-level selection and patch reconstruction.

This module turns a zero-context unified diff plus a set of line references
into a minimal patch that stages exactly those lines.

Main components:
- Types: Line, Hunk, FileDiff, Diff, FileSelection - structured diff and selection
- Refs: parse_file_refs(), parse_references() - parse FILE:REFS arguments
- Parser: parse_diff() - convert ``git diff -U0`` text to objects
- Resolver: resolve_selections() - match references to concrete diff lines
- Builder: build_patch() - re-emit a position-correct multi-file patch
- Display: format_diff(), format_selection() - numbered human output

Example usage:
    >>> from gitlines.patch import parse_diff, parse_references
    >>> from gitlines.patch import resolve_selections, build_patch
    >>> diff = parse_diff('''diff --git a/flake.nix b/flake.nix
    ... --- a/flake.nix
    ... +++ b/flake.nix
    ... @@ -136,0 +137 @@
    ... +      debug = true;
    ... ''')
    >>> resolved = resolve_selections(diff, parse_references(["flake.nix:137"]))
    >>> print(build_patch(resolved), end="")
    diff --git a/flake.nix b/flake.nix
    --- a/flake.nix
    +++ b/flake.nix
    @@ -136,0 +137 @@
    +      debug = true;
"""

from gitlines.patch.builder import build_file_patch, build_output_hunks, build_patch
from gitlines.patch.display import format_diff, format_selection
from gitlines.patch.parser import parse_diff
from gitlines.patch.refs import LineRange, parse_file_refs, parse_references
from gitlines.patch.resolver import resolve_selection, resolve_selections
from gitlines.patch.types import (
    Diff,
    FileDiff,
    FileSelection,
    Hunk,
    Line,
    LineKind,
    LineRef,
    LineSet,
    OutputHunk,
    ResolvedFile,
    SelectedGroup,
)

__all__ = [
    # Types
    "Diff",
    "FileDiff",
    "FileSelection",
    "Hunk",
    "Line",
    "LineKind",
    "LineRange",
    "LineRef",
    "LineSet",
    "OutputHunk",
    "ResolvedFile",
    "SelectedGroup",
    # Refs
    "parse_file_refs",
    "parse_references",
    # Parser
    "parse_diff",
    # Resolver
    "resolve_selection",
    "resolve_selections",
    # Builder
    "build_file_patch",
    "build_output_hunks",
    "build_patch",
    # Display
    "format_diff",
    "format_selection",
]
