"""Types for git-style patch representation.

Tokens are what the lexer produces, one per meaningful diff line. The four
hunk-body tokens (Addition, Deletion, Context, NoNewline) are also the lines
stored in a Hunk. All dataclasses are frozen; inversion returns new values.
"""

from dataclasses import dataclass, replace

from gapply.core.constants import DEV_NULL


@dataclass(frozen=True)
class Token:
    """Base class for all lexer tokens."""

    pass


@dataclass(frozen=True)
class FileHeader(Token):
    """``diff --git a/<old> b/<new>`` with the a/ b/ prefixes stripped."""

    old_file: str
    new_file: str


@dataclass(frozen=True)
class Index(Token):
    """``index <old>..<new> [mode]``."""

    old_hash: str
    new_hash: str
    mode: int | None = None


@dataclass(frozen=True)
class OldFile(Token):
    """``--- <path>``."""

    path: str


@dataclass(frozen=True)
class NewFile(Token):
    """``+++ <path>``."""

    path: str


@dataclass(frozen=True)
class HunkHeader(Token):
    """``@@ -<old_line>,<old_span> +<new_line>,<new_span> @@``."""

    old_line: int
    old_span: int
    new_line: int
    new_span: int


@dataclass(frozen=True)
class RenameFrom(Token):
    path: str


@dataclass(frozen=True)
class RenameTo(Token):
    path: str


@dataclass(frozen=True)
class CopyFrom(Token):
    path: str


@dataclass(frozen=True)
class CopyTo(Token):
    path: str


@dataclass(frozen=True)
class Similarity(Token):
    percent: int


@dataclass(frozen=True)
class Dissimilarity(Token):
    percent: int


@dataclass(frozen=True)
class NewFileMode(Token):
    """``new file mode <octal>`` or ``new mode <octal>``."""

    mode: int


@dataclass(frozen=True)
class OldFileMode(Token):
    """``old mode <octal>``."""

    mode: int


@dataclass(frozen=True)
class DeletedFileMode(Token):
    """``deleted file mode <octal>``."""

    mode: int


@dataclass(frozen=True)
class BinaryFileDiffer(Token):
    """``Binary files <old> and <new> differ`` (paths kept verbatim)."""

    old_file: str
    new_file: str


# --- Hunk body lines ---


@dataclass(frozen=True)
class Line(Token):
    """Base class for the tokens that make up a hunk body."""

    pass


@dataclass(frozen=True)
class Addition(Line):
    """A ``+`` line; text excludes the marker."""

    text: str


@dataclass(frozen=True)
class Deletion(Line):
    """A ``-`` line; text excludes the marker."""

    text: str


@dataclass(frozen=True)
class Context(Line):
    """A context line; text is the whole line, leading space included."""

    text: str


@dataclass(frozen=True)
class NoNewline(Line):
    """``\\ No newline at end of file``."""

    pass


@dataclass(frozen=True)
class Hunk:
    """A single hunk of a patch.

    Attributes:
        old_line: Start line in the original file (1-indexed, 0 when old_span is 0)
        old_span: Number of lines from the original (context + deletions)
        new_line: Start line in the new file (1-indexed, 0 when new_span is 0)
        new_span: Number of lines in the new version (context + additions)
        lines: Hunk body in diff order
    """

    old_line: int
    old_span: int
    new_line: int
    new_span: int
    lines: tuple[Line, ...] = ()

    def compute_counts(self) -> tuple[int, int]:
        """Compute actual (old_span, new_span) from the body lines."""
        old_count = 0
        new_count = 0
        for line in self.lines:
            match line:
                case Context():
                    old_count += 1
                    new_count += 1
                case Deletion():
                    old_count += 1
                case Addition():
                    new_count += 1
                case NoNewline():
                    pass
        return old_count, new_count

    def invert(self) -> "Hunk":
        """Return the hunk that undoes this one."""
        return replace(
            self,
            old_line=self.new_line,
            old_span=self.new_span,
            new_line=self.old_line,
            new_span=self.old_span,
            lines=tuple(_invert_line(line) for line in self.lines),
        )


def _invert_line(line: Line) -> Line:
    match line:
        case Addition(text=text):
            return Deletion(text)
        case Deletion(text=text):
            return Addition(text)
        case _:
            return line


@dataclass(frozen=True)
class Patch:
    """All changes to one file, as described by one ``diff --git`` section.

    A patch with no hunks is valid: a pure rename, copy or mode change.

    Attributes:
        old_file: Source path without a/ prefix, or ``/dev/null``
        new_file: Destination path without b/ prefix, or ``/dev/null``
        hunks: Content hunks in file order
        rename_from, rename_to: Paths from ``rename from`` / ``rename to``
        copy_from, copy_to: Paths from ``copy from`` / ``copy to``
        old_mode, new_mode: Modes from ``old mode`` / ``new [file] mode``
        deleted_file_mode: Mode from ``deleted file mode``
        index_mode: Mode from the ``index`` line
        similarity, dissimilarity: Percentages from the similarity lines
        is_binary: True when a ``Binary files ... differ`` line was seen
    """

    old_file: str = ""
    new_file: str = ""
    hunks: tuple[Hunk, ...] = ()
    rename_from: str | None = None
    rename_to: str | None = None
    copy_from: str | None = None
    copy_to: str | None = None
    old_mode: int | None = None
    new_mode: int | None = None
    deleted_file_mode: int | None = None
    index_mode: int | None = None
    similarity: int | None = None
    dissimilarity: int | None = None
    is_binary: bool = False

    @property
    def is_new_file(self) -> bool:
        """True if the patch creates its file."""
        return self.old_file == DEV_NULL

    @property
    def is_deleted(self) -> bool:
        """True if the patch deletes its file."""
        return self.new_file == DEV_NULL

    def invert(self) -> "Patch":
        """Return the patch that reverses this one.

        Old and new sides are swapped throughout. When the reversed patch
        deletes its file, the new mode is taken from ``deleted_file_mode``.
        """
        new_mode = self.old_mode
        if self.is_new_file:
            new_mode = self.deleted_file_mode
        return replace(
            self,
            old_file=self.new_file,
            new_file=self.old_file,
            rename_from=self.rename_to,
            rename_to=self.rename_from,
            copy_from=self.copy_to,
            copy_to=self.copy_from,
            old_mode=self.new_mode,
            new_mode=new_mode,
            hunks=tuple(hunk.invert() for hunk in self.hunks),
        )
