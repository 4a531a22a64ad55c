"""Git subprocess runner: the source of diff text and the sink for patches.

Every call runs ``git -C <repo> ...`` synchronously. Output is decoded with
surrogateescape so that file content round-trips to the patch byte for byte.
"""

from __future__ import annotations

import logging
import posixpath
import subprocess
from collections.abc import Iterable, Sequence
from pathlib import Path

from gitlines.core.encoding import decode_git_output, encode_git_input
from gitlines.core.errors import (
    GitExitError,
    GitNotFoundError,
    GitTimeoutError,
    IndexLockError,
)

logger = logging.getLogger(__name__)

# Zero-context diff with stable prefixes, independent of user diff config
DIFF_ARGS = (
    "diff",
    "--no-ext-diff",
    "--no-textconv",
    "--no-color",
    "--no-renames",
    "-U0",
    "--src-prefix=a/",
    "--dst-prefix=b/",
)

APPLY_ARGS = ("apply", "--cached", "--unidiff-zero", "--whitespace=nowarn", "-")


def pathspec(path: str) -> str:
    """Pathspec matching exactly one repository-relative path."""
    return f":(top,literal){path}"


class GitRunner:
    """Runs git commands against one repository.

    Args:
        repo_path: Directory to run git in (``git -C``)
        executable: git binary name or path
        timeout: Seconds to wait per command, None to wait indefinitely
    """

    def __init__(
        self,
        repo_path: str | Path = ".",
        executable: str = "git",
        timeout: float | None = None,
    ) -> None:
        self.repo_path = Path(repo_path)
        self.executable = executable
        self.timeout = timeout

    def run(self, args: Sequence[str], input: str | None = None) -> str:
        """Run a git command and return its decoded stdout.

        Raises:
            GitNotFoundError: The executable could not be started
            GitTimeoutError: The command exceeded the timeout
            IndexLockError: The index is locked by another git process
            GitExitError: The command exited non-zero
        """
        command = args[0] if args else ""
        cmd = [self.executable, "-C", str(self.repo_path), *args]
        logger.debug("Running: %s", " ".join(cmd))

        try:
            result = subprocess.run(
                cmd,
                input=encode_git_input(input) if input is not None else None,
                capture_output=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            assert self.timeout is not None
            raise GitTimeoutError(command, self.timeout) from e
        except OSError as e:
            raise GitNotFoundError(self.executable, str(e)) from e

        if result.returncode != 0:
            stderr = decode_git_output(result.stderr)
            logger.debug("git %s exited %d: %s", command, result.returncode, stderr.strip())
            if "index.lock" in stderr:
                raise IndexLockError(command, result.returncode, stderr)
            raise GitExitError(command, result.returncode, stderr)

        return decode_git_output(result.stdout)

    def show_prefix(self) -> str:
        """Path of the working directory relative to the repository root ('' at the root)."""
        return self.run(["rev-parse", "--show-prefix"]).strip()

    def to_repo_path(self, path: str, prefix: str) -> str:
        """Make a path given relative to the working directory repository-relative."""
        return posixpath.normpath(posixpath.join(prefix, path))

    def diff(self, paths: Iterable[str] = ()) -> str:
        """Zero-context diff of the working tree against the index.

        Args:
            paths: Repository-relative paths; empty for every changed file
        """
        args = list(DIFF_ARGS)
        specs = [pathspec(path) for path in paths]
        if specs:
            args += ["--", *specs]
        return self.run(args)

    def apply_cached(self, patch: str) -> None:
        """Apply a zero-context patch to the index in one all-or-nothing step."""
        logger.debug("Applying patch to index (%d bytes)", len(patch))
        self.run(APPLY_ARGS, input=patch)
