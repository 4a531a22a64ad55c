"""Argument parsing for the git-lines CLI."""

import argparse
from collections.abc import Sequence
from pathlib import Path

from gitlines.core.constants import VERSION

STAGE_EPILOG = """\
Syntax: FILE:REFS
  N         stage addition at new line N
  -N        stage deletion of old line N
  N..M      stage range of additions
  -N..-M    stage range of deletions
  A,B,C     combine any of the above

Examples:
  git lines stage file:137             single added line
  git lines stage file:-15             single deleted line
  git lines stage file:40..45,48       lines 40-45 and 48, skip 46-47
  git lines stage config.nix:-10,10    replace line 10, skip the rest
  git lines stage a.nix:10 b.nix:20    several files in one step
"""

DIFF_EPILOG = """\
Output format:
  +N:  added line (stage with N)
  -N:  deleted line (stage with -N)
"""


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add the options shared by every subcommand."""
    parser.add_argument(
        "-C",
        dest="path",
        metavar="PATH",
        default=".",
        help="Run as if git-lines was started in PATH instead of the current directory",
    )
    parser.add_argument(
        "--config",
        type=Path,
        metavar="FILE",
        help="Load configuration from FILE instead of ~/.gitlines and <repo>/.gitlines",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-lines",
        description=(
            "Non-interactive line-level git staging tool. Use 'git lines diff' "
            "to see line numbers, then 'git lines stage' to select lines."
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    add_common_args(parser)

    subparsers = parser.add_subparsers(dest="command", required=True)

    stage_parser = subparsers.add_parser(
        "stage",
        help="Stage specific lines from unstaged changes",
        description="Stage individual changed lines, even from within contiguous changes.",
        epilog=STAGE_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    stage_parser.add_argument(
        "file_refs",
        nargs="+",
        metavar="FILE:REFS",
        help="One or more FILE:REFS references",
    )
    stage_parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress output showing what was staged",
    )
    stage_parser.add_argument(
        "-n", "--dry-run",
        dest="dry_run",
        action="store_true",
        help="Print the patch instead of applying it",
    )

    diff_parser = subparsers.add_parser(
        "diff",
        help="Show unstaged changes with line numbers for staging",
        epilog=DIFF_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    diff_parser.add_argument(
        "files",
        nargs="*",
        metavar="FILE",
        help="Files to show (defaults to all changed files)",
    )

    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    return build_parser().parse_args(argv)
