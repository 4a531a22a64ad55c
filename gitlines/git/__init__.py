"""Git process boundary: fetching diffs and applying patches to the index."""

from gitlines.git.runner import APPLY_ARGS, DIFF_ARGS, GitRunner, pathspec

__all__ = [
    "APPLY_ARGS",
    "DIFF_ARGS",
    "GitRunner",
    "pathspec",
]
