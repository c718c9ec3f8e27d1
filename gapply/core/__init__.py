"""Core errors, constants and file-system collaborators."""

from gapply.core.constants import DEV_NULL, SUPPORTS_PERMISSIONS
from gapply.core.encoding import ENCODING, ENCODING_ERRORS, configure_stdio
from gapply.core.errors import (
    ApplyError,
    ArgumentError,
    ConfigError,
    GapplyError,
    IoError,
    ParseError,
    UnsupportedError,
)
from gapply.core.filesystem import DryRunFileSystem, MemoryFileSystem, OsFileSystem
from gapply.core.interfaces import FileSystem

__all__ = [
    "DEV_NULL",
    "SUPPORTS_PERMISSIONS",
    "ENCODING",
    "ENCODING_ERRORS",
    "configure_stdio",
    # Errors
    "GapplyError",
    "ParseError",
    "ApplyError",
    "UnsupportedError",
    "IoError",
    "ArgumentError",
    "ConfigError",
    # File systems
    "FileSystem",
    "OsFileSystem",
    "MemoryFileSystem",
    "DryRunFileSystem",
]
