"""Shared pytest fixtures and configuration for pytest."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "git: test runs the real git executable")


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Auto-skip git tests when git is not installed."""
    if shutil.which("git") is not None:
        return
    skip_git = pytest.mark.skip(reason="git executable not found")
    for item in items:
        if "git" in item.keywords:
            item.add_marker(skip_git)


class GitRepo:
    """A throwaway repository driven through the real git CLI."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def git(self, *args: str) -> bytes:
        result = subprocess.run(
            [
                "git",
                "-c", "user.name=Test",
                "-c", "user.email=test@example.com",
                "-c", "commit.gpgsign=false",
                "-c", "core.autocrlf=false",
                "-C", str(self.path),
                *args,
            ],
            capture_output=True,
            check=True,
        )
        return result.stdout

    def write(self, name: str, content: str | bytes) -> Path:
        path = self.path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            content = content.encode("utf-8")
        path.write_bytes(content)
        return path

    def commit(self, message: str = "commit") -> None:
        self.git("add", "-A")
        self.git("commit", "-q", "-m", message)

    def staged(self, name: str) -> bytes:
        """Content of a file as recorded in the index."""
        return self.git("show", f":{name}")

    def unstaged_diff(self) -> str:
        return self.git("diff", "-U0", "--no-color").decode("utf-8", "surrogateescape")

    def reset_index(self) -> None:
        self.git("reset", "-q")


@pytest.fixture
def git_repo(tmp_path: Path) -> GitRepo:
    """An empty git repository in tmp_path."""
    repo = GitRepo(tmp_path / "repo")
    repo.path.mkdir()
    repo.git("init", "-q")
    return repo
