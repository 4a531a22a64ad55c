"""Tests for the git-lines command line (stager mocked)."""

import logging
from collections.abc import Iterator
from unittest.mock import MagicMock, patch

import pytest

from gitlines.cli.arg_parser import parse_args
from gitlines.cli.main import configure_logging, main
from gitlines.config import Config
from gitlines.core.errors import ConfigError, NoMatchingLinesError
from gitlines.stager import StagePlan


@pytest.fixture(autouse=True)
def _isolate() -> Iterator[None]:
    """Keep main() from touching real stdio encodings and logger state."""
    gitlines_logger = logging.getLogger("gitlines")
    handlers = list(gitlines_logger.handlers)
    level, propagate = gitlines_logger.level, gitlines_logger.propagate
    with patch("gitlines.cli.main.configure_stdio"):
        yield
    gitlines_logger.handlers[:] = handlers
    gitlines_logger.setLevel(level)
    gitlines_logger.propagate = propagate


@pytest.fixture
def stager() -> Iterator[MagicMock]:
    """Patch GitLines in the CLI and config loading."""
    with patch("gitlines.cli.main.load_config", return_value=Config()), \
            patch("gitlines.cli.main.GitLines") as mock_cls:
        yield mock_cls


def _plan(summary: str = "f.txt:\n  +1:\tx\n", patch_text: str = "diff --git a/f.txt b/f.txt\n") -> MagicMock:
    plan = MagicMock(spec=StagePlan)
    plan.summary.return_value = summary
    plan.patch = patch_text
    return plan


class TestParseArgs:
    """Tests for argument parsing."""

    def test_stage_args(self) -> None:
        args = parse_args(["-C", "repo", "stage", "-q", "a.nix:137", "b.nix:-2"])
        assert args.command == "stage"
        assert args.path == "repo"
        assert args.quiet is True
        assert args.dry_run is False
        assert args.file_refs == ["a.nix:137", "b.nix:-2"]

    def test_diff_defaults(self) -> None:
        args = parse_args(["diff"])
        assert args.files == []
        assert args.path == "."
        assert args.config is None

    def test_stage_requires_refs(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["stage"])
        assert exc_info.value.code == 2

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            parse_args([])
        assert exc_info.value.code == 2


class TestMain:
    """Tests for main()."""

    def test_stage_prints_summary(self, stager: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
        stager.return_value.stage.return_value = _plan()

        assert main(["-C", "repo", "stage", "f.txt:1"]) == 0

        stager.assert_called_once()
        assert stager.call_args.args[0] == "repo"
        stager.return_value.stage.assert_called_once_with(["f.txt:1"])
        out = capsys.readouterr().out
        assert out.startswith("Staged:\n")
        assert "f.txt:" in out
        assert "+1:" in out

    def test_stage_quiet(self, stager: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
        stager.return_value.stage.return_value = _plan()

        assert main(["stage", "-q", "f.txt:1"]) == 0

        assert capsys.readouterr().out == ""

    def test_dry_run_prints_patch_without_staging(
        self, stager: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        stager.return_value.plan.return_value = _plan()

        assert main(["stage", "--dry-run", "f.txt:1"]) == 0

        stager.return_value.stage.assert_not_called()
        assert "diff --git a/f.txt b/f.txt" in capsys.readouterr().out

    def test_diff(self, stager: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
        stager.return_value.diff.return_value = "f.txt:\n  -3:\told\n"

        assert main(["diff", "f.txt"]) == 0

        stager.return_value.diff.assert_called_once_with(["f.txt"])
        out = capsys.readouterr().out
        assert "f.txt:" in out
        assert "-3:" in out

    def test_empty_diff_prints_nothing(self, stager: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
        stager.return_value.diff.return_value = ""

        assert main(["diff"]) == 0

        assert capsys.readouterr().out == ""

    def test_error_exit_status(self, stager: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
        stager.return_value.stage.side_effect = NoMatchingLinesError("f.txt", ["9"])

        assert main(["stage", "f.txt:9"]) == 1

        err = capsys.readouterr().err
        assert "Error:" in err
        assert "No matching lines found for f.txt: 9" in err

    def test_config_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("gitlines.cli.main.load_config", side_effect=ConfigError("Invalid JSON in x")):
            assert main(["diff"]) == 1

        assert "Invalid JSON in x" in capsys.readouterr().err


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_handler_installed_once(self) -> None:
        configure_logging("INFO")
        configure_logging("INFO")

        gitlines_logger = logging.getLogger("gitlines")
        assert len(gitlines_logger.handlers) == 1
        assert gitlines_logger.level == logging.INFO
        assert gitlines_logger.propagate is False

    def test_verbose_forces_debug(self) -> None:
        configure_logging("ERROR", verbose=True)
        assert logging.getLogger("gitlines").level == logging.DEBUG
