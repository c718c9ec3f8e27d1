"""Logging bootstrap for the gapply CLI."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: int = logging.WARNING, log_file: Path | None = None) -> None:
    """Configure the gapply namespace logger.

    Console output goes to stderr so it never mixes with the per-file
    report on stdout. When log_file is given, the same records are also
    written to a rotating file (max 5MB per file, 3 backup files).

    Args:
        level: Minimum level for all handlers.
        log_file: Optional path of a log file. Parent directories are created.
    """
    gapply_logger = logging.getLogger("gapply")
    gapply_logger.setLevel(level)

    # Remove any existing handlers to avoid duplicates on reconfigure
    for handler in list(gapply_logger.handlers):
        gapply_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    gapply_logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        )
        gapply_logger.addHandler(file_handler)

    # Don't propagate to root logger
    gapply_logger.propagate = False

    logger.debug("Logging configured: level=%s, file=%s", logging.getLevelName(level), log_file)
