"""Command-line interface."""

from gapply.cli.main import main, run

__all__ = ["main", "run"]
