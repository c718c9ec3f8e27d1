"""File-system implementations used by the patch orchestrator.

- OsFileSystem: real files, optionally rooted under a directory
- MemoryFileSystem: in-memory files, directories and modes (tests, tooling)
- DryRunFileSystem: reads through to another file system, keeps writes in memory
"""

import logging
import os
import stat
import tempfile
from pathlib import Path

from gapply.core.encoding import ENCODING
from gapply.core.interfaces import FileSystem

logger = logging.getLogger(__name__)


def atomic_write_text(path: Path, content: str) -> None:
    """Write content to a file atomically using temp file + rename.

    The temp file is created in the same directory to ensure same-filesystem
    rename. Newlines are written untranslated. An existing file keeps its
    permission bits.

    Raises:
        OSError: If the file cannot be written.
    """
    existing_mode: int | None = None
    try:
        existing_mode = stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        pass

    if existing_mode is None:
        # New file - normal creation honours the process umask
        with open(path, "w", encoding=ENCODING, newline="") as f:
            f.write(content)
        return

    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".tmp_", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding=ENCODING, newline="") as f:
            f.write(content)
        os.chmod(tmp_path, existing_mode)
        # Atomic rename (on POSIX; Windows may not be truly atomic)
        os.replace(tmp_path, str(path))
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


class OsFileSystem:
    """File system backed by the operating system.

    Args:
        root: Directory that patch paths are relative to (default: process cwd).
    """

    def __init__(self, root: Path | None = None) -> None:
        self._root = root

    def _resolve(self, path: str) -> Path:
        if self._root is None:
            return Path(path)
        return self._root / path

    def read_to_string(self, path: str) -> str:
        with open(self._resolve(path), encoding=ENCODING, newline="") as f:
            try:
                return f.read()
            except UnicodeDecodeError as e:
                # Surface as an OSError so the orchestrator wraps it uniformly
                raise OSError(f"{path} is not valid {ENCODING} text: {e}") from e

    def write(self, path: str, contents: str) -> None:
        atomic_write_text(self._resolve(path), contents)

    def remove_file(self, path: str) -> None:
        self._resolve(path).unlink()

    def create_dir_all(self, path: str) -> None:
        self._resolve(path).mkdir(parents=True, exist_ok=True)

    def set_permissions(self, path: str, mode: int) -> None:
        os.chmod(self._resolve(path), stat.S_IMODE(mode))

    def get_permissions(self, path: str) -> int:
        return self._resolve(path).stat().st_mode


class MemoryFileSystem:
    """In-memory file system.

    Attributes:
        files: Mapping of path to file text.
        created_dirs: Every directory passed to create_dir_all, in call order.
        file_modes: Mapping of path to the mode last set with set_permissions.
    """

    def __init__(
        self,
        files: dict[str, str] | None = None,
        created_dirs: list[str] | None = None,
        file_modes: dict[str, int] | None = None,
    ) -> None:
        self.files: dict[str, str] = dict(files or {})
        self.created_dirs: list[str] = list(created_dirs or [])
        self.file_modes: dict[str, int] = dict(file_modes or {})

    def read_to_string(self, path: str) -> str:
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(f"file not found: {path}") from None

    def write(self, path: str, contents: str) -> None:
        self.files[path] = contents

    def remove_file(self, path: str) -> None:
        if self.files.pop(path, None) is None:
            raise FileNotFoundError(f"file not found: {path}")

    def create_dir_all(self, path: str) -> None:
        self.created_dirs.append(path)

    def set_permissions(self, path: str, mode: int) -> None:
        self.file_modes[path] = mode

    def get_permissions(self, path: str) -> int:
        try:
            return self.file_modes[path]
        except KeyError:
            raise FileNotFoundError(f"permissions not found: {path}") from None


class DryRunFileSystem(MemoryFileSystem):
    """Overlay that never touches the wrapped file system.

    Reads consult the overlay first, then the base. Writes, deletions,
    directories and modes are recorded only in the overlay, so a whole
    patch stream can be checked against real files without changing them.
    """

    def __init__(self, base: FileSystem) -> None:
        super().__init__()
        self._base = base
        self.removed: set[str] = set()

    def read_to_string(self, path: str) -> str:
        if path in self.files:
            return self.files[path]
        if path in self.removed:
            raise FileNotFoundError(f"file not found: {path}")
        return self._base.read_to_string(path)

    def write(self, path: str, contents: str) -> None:
        self.removed.discard(path)
        super().write(path, contents)

    def remove_file(self, path: str) -> None:
        # Raises FileNotFoundError when neither layer has the file
        self.read_to_string(path)
        self.files.pop(path, None)
        self.removed.add(path)
        logger.debug("Dry run: would remove %s", path)

    def get_permissions(self, path: str) -> int:
        if path in self.file_modes:
            return self.file_modes[path]
        return self._base.get_permissions(path)
