"""Rich-based output utilities for the git-lines CLI."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.text import Text

_console: Console | None = None
_error_console: Console | None = None


def get_console() -> Console:
    """Get the shared stdout Console, creating it with default settings on first use."""
    global _console
    if _console is None:
        _console = Console(highlight=False)
    return _console


def get_error_console() -> Console:
    """Get the shared stderr Console."""
    global _error_console
    if _error_console is None:
        _error_console = Console(stderr=True, highlight=False)
    return _error_console


def configure_console(color: bool = True) -> None:
    """Recreate the shared consoles, with or without color."""
    global _console, _error_console
    _console = Console(highlight=False, no_color=not color)
    _error_console = Console(stderr=True, highlight=False, no_color=not color)


def _numbered_style(line: str) -> str:
    if line.startswith("  +"):
        return "green"
    if line.startswith("  -"):
        return "red"
    if line.endswith(":") and not line.startswith(" "):
        return "bold"
    return ""


def _patch_style(line: str) -> str:
    if line.startswith(("diff --git", "--- ", "+++ ")):
        return "bold"
    if line.startswith("@@"):
        return "cyan"
    if line.startswith("+"):
        return "green"
    if line.startswith("-"):
        return "red"
    return ""


def _print_styled(text: str, style_for) -> None:
    console = get_console()
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    for line in lines:
        console.print(Text(line, style=style_for(line)), soft_wrap=True)


def print_numbered(text: str) -> None:
    """Print numbered diff output: additions green, deletions red, file names bold."""
    _print_styled(text, _numbered_style)


def print_patch(patch: str) -> None:
    """Print raw patch text with diff coloring."""
    _print_styled(patch, _patch_style)


def print_error(message: str) -> None:
    """Print an error message in red to stderr.

    Args:
        message: The error message to display.
    """
    get_error_console().print(f"[bold red]Error:[/bold red] {escape(message)}", soft_wrap=True)


def print_info(message: str) -> None:
    """Print an informational message."""
    get_console().print(Text(message), soft_wrap=True)
