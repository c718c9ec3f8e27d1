"""Entry point for the gapply command."""

import argparse
import logging
import sys
from pathlib import Path

from gapply.cli.arg_parser import build_parser
from gapply.cli.log_setup import configure_logging
from gapply.cli.output import print_change, print_error
from gapply.config import Config, load_config
from gapply.core.encoding import ENCODING, configure_stdio
from gapply.core.errors import GapplyError, IoError
from gapply.core.filesystem import DryRunFileSystem, OsFileSystem
from gapply.core.interfaces import FileSystem
from gapply.patch.orchestrator import FileChange, apply_patch_text

logger = logging.getLogger(__name__)

_VERBOSITY_LEVELS = {1: logging.INFO, 2: logging.DEBUG}


def _log_level(args: argparse.Namespace, config: Config) -> int:
    if args.verbose:
        return _VERBOSITY_LEVELS.get(args.verbose, logging.DEBUG)
    return logging.getLevelName(config.logging.level)


def _read_patch_text(path: str | None) -> str:
    """Read the patch from a file, or from stdin when no path is given."""
    try:
        if path is not None:
            return Path(path).read_text(encoding=ENCODING)
        return sys.stdin.read()
    except UnicodeDecodeError as e:
        raise IoError("UnicodeDecodeError", f"patch is not valid {ENCODING} text: {e}") from e
    except OSError as e:
        raise IoError.from_os_error(e) from e


def _build_file_system(args: argparse.Namespace, config: Config) -> FileSystem:
    root = args.root or config.apply.root
    fs: FileSystem = OsFileSystem(Path(root).expanduser() if root else None)
    if args.check:
        fs = DryRunFileSystem(fs)
    return fs


def run(argv: list[str] | None = None) -> int:
    """Run gapply and return the process exit status.

    Raises:
        GapplyError: For any argument, config, parse, apply or I/O failure.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(Path(args.config) if args.config else None)
    log_file = Path(config.logging.file).expanduser() if config.logging.file else None
    configure_logging(_log_level(args, config), log_file)

    if args.patch is None and sys.stdin.isatty():
        parser.print_help()
        return 0

    patch_text = _read_patch_text(args.patch)
    logger.debug("Read %d bytes of patch text", len(patch_text))

    def report(change: FileChange) -> None:
        print_change(change, check=args.check)

    changes = apply_patch_text(
        _build_file_system(args, config),
        patch_text,
        reverse=args.reverse,
        set_permissions=config.apply.set_permissions,
        on_change=report,
    )
    logger.info("%d file(s) changed", len(changes))
    return 0


def main(argv: list[str] | None = None) -> None:
    """Console-script entry point: run and exit with 0 or 1."""
    configure_stdio()
    try:
        status = run(argv)
    except GapplyError as e:
        print_error(e.message)
        sys.exit(1)
    sys.exit(status)
