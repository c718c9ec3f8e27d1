"""Rich-based output utilities for the gapply CLI."""

from rich.console import Console
from rich.markup import escape

from gapply.patch.orchestrator import ChangeKind, FileChange

# Shared console instances
console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def format_change(change: FileChange, check: bool = False) -> str:
    """Return the user-facing line for one file change."""
    if change.kind is ChangeKind.DELETED:
        verb = "Would delete file" if check else "Deleted file"
    else:
        verb = "Would apply patch to" if check else "Applied patch to"
    return f"{verb}: {change.path}"


def print_change(change: FileChange, check: bool = False) -> None:
    """Print one file change to stdout.

    Args:
        change: The change to report.
        check: True when nothing was written (--check).
    """
    console.print(escape(format_change(change, check)), soft_wrap=True)


def print_error(message: str) -> None:
    """Print an error message in red to stderr.

    Args:
        message: The error message to display.
    """
    err_console.print(f"[bold red]Error:[/bold red] {escape(message)}", soft_wrap=True)
