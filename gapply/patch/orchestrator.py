"""Apply a stream of patches through a file-system collaborator.

Patches are applied strictly in stream order. The first error aborts the
run; changes made by earlier patches stay in place.
"""

import logging
import posixpath
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from gapply.core.constants import SUPPORTS_PERMISSIONS
from gapply.core.errors import IoError, UnsupportedError
from gapply.core.interfaces import FileSystem
from gapply.patch.applier import apply, invert
from gapply.patch.parser import Parser
from gapply.patch.types import Patch

logger = logging.getLogger(__name__)


class ChangeKind(Enum):
    """What a patch did to a file."""

    APPLIED = "applied"
    DELETED = "deleted"


@dataclass(frozen=True)
class FileChange:
    """One file mutation performed while applying a patch stream.

    Attributes:
        kind: Whether the file was written or deleted.
        path: Path of the written or deleted file.
    """

    kind: ChangeKind
    path: str


ChangeCallback = Callable[[FileChange], None]


def _read_source(fs: FileSystem, patch: Patch) -> str:
    if patch.is_new_file:
        return ""

    path = patch.copy_from if patch.copy_from is not None else patch.old_file
    try:
        return fs.read_to_string(path)
    except FileNotFoundError:
        # New-file creation without a /dev/null header
        logger.debug("Source %s not found, treating as empty", path)
        return ""
    except OSError as e:
        raise IoError.from_os_error(e) from e


def _remove_tolerating_missing(fs: FileSystem, path: str) -> bool:
    """Remove a file. Returns False if it was already gone."""
    try:
        fs.remove_file(path)
    except FileNotFoundError:
        logger.debug("File %s already absent", path)
        return False
    except OSError as e:
        raise IoError.from_os_error(e) from e
    return True


def apply_single_patch(
    fs: FileSystem,
    patch: Patch,
    *,
    set_permissions: bool = True,
) -> list[FileChange]:
    """Apply one already-parsed patch.

    Args:
        fs: File system to read from and write to
        patch: Patch to apply (already inverted for reverse application)
        set_permissions: Apply new/index modes on platforms that have them

    Returns:
        The file changes made, in order.

    Raises:
        UnsupportedError: For binary patches.
        ApplyError: If the hunks do not match the source file.
        IoError: For file-system failures other than tolerated missing files.
    """
    if patch.is_binary:
        raise UnsupportedError("Binary files are not supported")

    source_path = patch.old_file
    source_content = _read_source(fs, patch)
    new_content = apply(patch, source_content)

    if patch.is_deleted:
        if _remove_tolerating_missing(fs, source_path):
            logger.info("Deleted %s", source_path)
            return [FileChange(ChangeKind.DELETED, source_path)]
        return []

    output_path = patch.new_file
    changes = [FileChange(ChangeKind.APPLIED, output_path)]
    try:
        parent = posixpath.dirname(output_path)
        if parent:
            fs.create_dir_all(parent)

        fs.write(output_path, new_content)
        logger.info("Wrote %s (%d hunks)", output_path, len(patch.hunks))

        mode = patch.new_mode if patch.new_mode is not None else patch.index_mode
        if set_permissions and SUPPORTS_PERMISSIONS and mode is not None:
            fs.set_permissions(output_path, mode)
            logger.debug("Set mode of %s to %o", output_path, mode)
    except OSError as e:
        raise IoError.from_os_error(e) from e

    if patch.rename_from is not None and source_path != output_path:
        if _remove_tolerating_missing(fs, source_path):
            logger.info("Removed %s after rename to %s", source_path, output_path)

    return changes


def apply_patch_text(
    fs: FileSystem,
    text: str,
    reverse: bool = False,
    *,
    set_permissions: bool = True,
    on_change: ChangeCallback | None = None,
) -> list[FileChange]:
    """Parse patch text and apply every patch in it, in order.

    Args:
        fs: File system to read from and write to
        text: Diff text containing zero or more patches
        reverse: Invert each patch before applying it
        set_permissions: Apply new/index modes on platforms that have them
        on_change: Called with each FileChange as soon as it happens

    Returns:
        All file changes made, in order.

    Raises:
        ParseError, ApplyError, UnsupportedError, IoError: The first failure.
            Patches applied before it are not rolled back.

    Example:
        >>> from gapply.core.filesystem import MemoryFileSystem
        >>> fs = MemoryFileSystem({"f.txt": "old\\n"})
        >>> changes = apply_patch_text(fs, "--- a/f.txt\\n+++ b/f.txt\\n@@ -1 +1 @@\\n-old\\n+new\\n")
        >>> fs.files["f.txt"]
        'new\\n'
    """
    changes: list[FileChange] = []
    for patch in Parser(text):
        if reverse:
            patch = invert(patch)
        for change in apply_single_patch(fs, patch, set_permissions=set_permissions):
            changes.append(change)
            if on_change is not None:
                on_change(change)
    return changes
