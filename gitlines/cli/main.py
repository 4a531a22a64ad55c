"""Entry point for the git-lines CLI.

Installed as the ``git-lines`` console script, so git runs it for
``git lines ...``.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from gitlines.cli.arg_parser import parse_args
from gitlines.cli.output import configure_console, print_error, print_info, print_numbered, print_patch
from gitlines.config.loader import load_config
from gitlines.config.schema import Config
from gitlines.core.encoding import configure_stdio
from gitlines.core.errors import GitLinesError
from gitlines.stager import GitLines

logger = logging.getLogger(__name__)


def configure_logging(level: str | int, verbose: bool = False) -> None:
    """Send gitlines.* logs to stderr.

    Args:
        level: Level name from config (e.g. "WARNING")
        verbose: Force DEBUG regardless of level
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    ))

    gitlines_logger = logging.getLogger("gitlines")
    gitlines_logger.setLevel(logging.DEBUG if verbose else level)

    # Remove any existing handlers to avoid duplicates on reconfigure
    gitlines_logger.handlers.clear()
    gitlines_logger.addHandler(handler)
    gitlines_logger.propagate = False


def cmd_stage(stager: GitLines, args: argparse.Namespace, config: Config) -> int:
    if args.dry_run:
        plan = stager.plan(args.file_refs)
        print_patch(plan.patch)
        return 0

    plan = stager.stage(args.file_refs)
    if not (args.quiet or config.output.quiet):
        print_info("Staged:")
        print_numbered(plan.summary())
    return 0


def cmd_diff(stager: GitLines, args: argparse.Namespace) -> int:
    output = stager.diff(args.files)
    if output:
        print_numbered(output)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run git-lines and return the process exit status."""
    configure_stdio()
    args = parse_args(argv)

    try:
        config = load_config(args.config, repo_path=Path(args.path))
    except GitLinesError as e:
        print_error(e.message)
        return 1

    configure_logging(config.logging.level, args.verbose)
    configure_console(color=config.output.color)
    logger.debug("Command: %s, repository: %s", args.command, args.path)

    stager = GitLines(args.path, config=config)
    try:
        if args.command == "stage":
            return cmd_stage(stager, args, config)
        return cmd_diff(stager, args)
    except GitLinesError as e:
        print_error(e.message)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
