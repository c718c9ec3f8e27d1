"""gapply - apply unified and git-style diffs to files."""

__version__ = "0.1.0"
