"""Typed exception hierarchy for gapply."""

from __future__ import annotations


class GapplyError(Exception):
    """Base class for all gapply errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ParseError(GapplyError):
    """Raised for malformed diff syntax (paths, headers, hunk line counts)."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Failed to parse patch: {detail}")


class ApplyError(GapplyError):
    """Raised when hunk content does not match the source file."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Failed to apply patch: {detail}")


class UnsupportedError(GapplyError):
    """Raised for patch content gapply recognises but does not handle (binary)."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Unsupported patch type: {detail}")


class IoError(GapplyError):
    """Raised for file-system failures.

    Attributes:
        kind: Name of the underlying OS exception class (e.g. ``PermissionError``).
        detail: The OS error text.
    """

    def __init__(self, kind: str, detail: str) -> None:
        self.kind = kind
        self.detail = detail
        super().__init__(f"I/O error: {detail}")

    @classmethod
    def from_os_error(cls, error: OSError) -> IoError:
        """Wrap an OSError, keeping its class name as the kind."""
        return cls(type(error).__name__, str(error))


class ArgumentError(GapplyError):
    """Raised for malformed command-line invocations."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Command-line argument error: {detail}")


class ConfigError(GapplyError):
    """Raised for configuration issues (missing file, invalid JSON, validation failure)."""
