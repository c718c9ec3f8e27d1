"""Argument parsing for the gapply CLI."""

import argparse
from typing import NoReturn

from gapply import __version__
from gapply.core.errors import ArgumentError


class _RaisingArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises ArgumentError instead of exiting with status 2."""

    def error(self, message: str) -> NoReturn:
        raise ArgumentError(message)


def build_parser() -> argparse.ArgumentParser:
    """Build the gapply argument parser."""
    parser = _RaisingArgumentParser(
        prog="gapply",
        description=(
            "Apply a unified or git-style diff to files in the working tree. "
            "Reads the patch from PATCH, or from standard input when omitted."
        ),
    )
    parser.add_argument(
        "patch",
        nargs="?",
        metavar="PATCH",
        help="Patch file to apply (default: read standard input)",
    )
    parser.add_argument(
        "--reverse", "-r",
        action="store_true",
        help="Apply the patch in reverse (undo it)",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Check that the patch applies without changing any file",
    )
    parser.add_argument(
        "--root",
        metavar="DIR",
        help="Directory that patch paths are relative to (default: current directory)",
    )
    parser.add_argument(
        "--config",
        metavar="FILE",
        help="Config file to use instead of ~/.gapply and ./.gapply layers",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Log progress to stderr (-v for info, -vv for debug)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser
