"""UTF-8 encoding constants and helpers for gapply."""

import sys

# Encoding constants
ENCODING = "utf-8"
ENCODING_ERRORS = "replace"  # Preserve data, mark corruption


def configure_stdio() -> None:
    """Reconfigure stdout/stderr to use UTF-8 with replace error handling.

    stdin is left strict: patch text read from it must decode cleanly, since
    a replaced character would never match the file being patched.
    """
    for stream in (sys.stdout, sys.stderr):
        if hasattr(stream, "reconfigure"):
            stream.reconfigure(encoding=ENCODING, errors=ENCODING_ERRORS)
