"""Line-level staging: the pipeline from references to an updated index.

plan_stage() is the pure part: diff text and selections in, patch out.
GitLines wires it to a GitRunner, fetching a fresh diff on every call and
applying the whole patch with a single ``git apply --cached``.

Example:
    >>> stager = GitLines("path/to/repo")
    >>> print(stager.diff(["flake.nix"]))           # doctest: +SKIP
    >>> stager.stage(["flake.nix:137", "zsh.nix:-15"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from gitlines.config.schema import Config
from gitlines.core.errors import ParseError
from gitlines.git.runner import GitRunner
from gitlines.patch.builder import build_patch
from gitlines.patch.display import format_diff, format_selection
from gitlines.patch.parser import parse_diff
from gitlines.patch.refs import parse_references
from gitlines.patch.resolver import resolve_selections
from gitlines.patch.types import FileSelection, ResolvedFile

logger = logging.getLogger(__name__)


@dataclass
class StagePlan:
    """Everything one staging run computed.

    Attributes:
        selections: Repository-relative selections, one per file
        resolved: Selections matched against the diff
        patch: Combined patch text for all files
    """

    selections: list[FileSelection] = field(default_factory=list)
    resolved: list[ResolvedFile] = field(default_factory=list)
    patch: str = ""

    def summary(self) -> str:
        """Numbered listing of the staged lines."""
        return format_selection(self.resolved)


def plan_stage(diff_text: str, selections: Sequence[FileSelection]) -> StagePlan:
    """Compute the patch that stages exactly the selected lines.

    Every selection is resolved before the patch is built, so an error in
    any file means no patch at all.

    Raises:
        DiffError: diff_text does not parse
        SelectionError: A selection does not match the diff
        PatchError: The selected groups of a file overlap
    """
    diff = parse_diff(diff_text)
    resolved = resolve_selections(diff, selections)
    return StagePlan(
        selections=list(selections),
        resolved=resolved,
        patch=build_patch(resolved),
    )


class GitLines:
    """Line-level staging against one repository.

    Args:
        repo_path: Repository (or subdirectory) to operate in
        runner: GitRunner to use; built from config when omitted
        config: Loaded configuration; defaults when omitted
    """

    def __init__(
        self,
        repo_path: str | Path = ".",
        runner: GitRunner | None = None,
        config: Config | None = None,
    ) -> None:
        self.config = config or Config()
        self.runner = runner or GitRunner(
            repo_path,
            executable=self.config.git.executable,
            timeout=self.config.git.timeout,
        )

    def _repo_paths(self, paths: Iterable[str]) -> list[str]:
        paths = list(paths)
        if not paths:
            return []
        prefix = self.runner.show_prefix()
        return [self.runner.to_repo_path(path, prefix) for path in paths]

    def _selections(self, references: Iterable[str]) -> list[FileSelection]:
        """Parse references and rebase their paths onto the repository root."""
        parsed = parse_references(references)
        if not parsed:
            raise ParseError("No file references given")

        merged: dict[str, FileSelection] = {}
        for selection, path in zip(parsed, self._repo_paths(s.path for s in parsed)):
            rebased = FileSelection(path, selection.additions, selection.deletions)
            merged[path] = merged[path].merge(rebased) if path in merged else rebased
        return list(merged.values())

    def diff(self, files: Iterable[str] = ()) -> str:
        """Numbered diff of unstaged changes, for all files or only the given ones."""
        raw = self.runner.diff(self._repo_paths(files))
        return format_diff(parse_diff(raw))

    def plan(self, references: Iterable[str]) -> StagePlan:
        """Parse, fetch and resolve without touching the index."""
        selections = self._selections(references)
        raw = self.runner.diff([selection.path for selection in selections])
        return plan_stage(raw, selections)

    def stage(self, references: Iterable[str]) -> StagePlan:
        """Stage the referenced lines in one atomic apply.

        Args:
            references: ``FILE:REFS`` groups, e.g. ``["a.nix:137", "b.nix:-3,12"]``

        Returns:
            The plan that was applied.
        """
        plan = self.plan(references)
        self.runner.apply_cached(plan.patch)
        logger.info("Staged %s", ", ".join(str(s) for s in plan.selections))
        return plan
