"""Core interfaces (protocols) for gapply.

This module defines the Protocol interfaces that collaborators must implement.
Using Protocols enables structural subtyping for better type checking without
requiring inheritance.
"""

from typing import Protocol


class FileSystem(Protocol):
    """Protocol for the file operations the patch orchestrator performs.

    Paths are the repository-relative paths found in the patch text.
    Implementations raise ``FileNotFoundError`` for missing files and any
    other ``OSError`` for the remaining failures; the orchestrator decides
    which of those it tolerates.

    Example:
        class MyFileSystem:
            def read_to_string(self, path: str) -> str:
                return storage[path]

            def write(self, path: str, contents: str) -> None:
                storage[path] = contents
            ...
    """

    def read_to_string(self, path: str) -> str:
        """Return the full text of a file.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        ...

    def write(self, path: str, contents: str) -> None:
        """Create or replace a file with the given text."""
        ...

    def remove_file(self, path: str) -> None:
        """Delete a file.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        ...

    def create_dir_all(self, path: str) -> None:
        """Create a directory and any missing parents."""
        ...

    def set_permissions(self, path: str, mode: int) -> None:
        """Set the permission bits of a file (POSIX only)."""
        ...

    def get_permissions(self, path: str) -> int:
        """Return the mode of a file (POSIX only)."""
        ...
