"""Line-level tokenizer for unified and extended git diffs.

Each non-blank input line becomes exactly one Token. Classification is by
prefix, in a fixed precedence order, because several prefixes overlap
(``--- a/x`` is also a line starting with ``-``).
"""

import re

from gapply.core.constants import DEV_NULL
from gapply.core.errors import ParseError
from gapply.patch.types import (
    Addition,
    BinaryFileDiffer,
    Context,
    CopyFrom,
    CopyTo,
    DeletedFileMode,
    Deletion,
    Dissimilarity,
    FileHeader,
    HunkHeader,
    Index,
    NewFile,
    NewFileMode,
    NoNewline,
    OldFile,
    OldFileMode,
    RenameFrom,
    RenameTo,
    Similarity,
    Token,
)

NO_NEWLINE_MARKER = "\\ No newline at end of file"

# Range inside a hunk header: <line>[,<span>]
_RANGE_RE = re.compile(r"(\d+)(?:,(\d+))?")
_OCTAL_RE = re.compile(r"[0-7]+")
_NUMBER_RE = re.compile(r"\d+")


def _strip_git_prefix(path: str) -> str:
    """Strip the a/ or b/ prefix; /dev/null is the only unprefixed path allowed."""
    if path.startswith("a/") or path.startswith("b/"):
        return path[2:]
    if path == DEV_NULL:
        return path
    raise ParseError(f"Malformed file path: `{path}`")


def _parse_octal_mode(text: str) -> int:
    if not _OCTAL_RE.fullmatch(text):
        raise ParseError(f"Invalid file mode: `{text}`")
    return int(text, 8)


def _parse_percentage(text: str, error_msg: str) -> int:
    if not text.endswith("%"):
        raise ParseError(f"{error_msg}: Missing percentage sign")
    number = text[:-1]
    if not _NUMBER_RE.fullmatch(number):
        raise ParseError(f"{error_msg}: `{number}` is not a number")
    return int(number)


def _parse_index_line(rest: str) -> Index:
    parts = rest.split()
    if not parts:
        raise ParseError("Invalid index line")

    old_hash, sep, new_hash = parts[0].partition("..")
    if not sep:
        raise ParseError("Invalid index hash range")

    mode = _parse_octal_mode(parts[1]) if len(parts) > 1 else None
    return Index(old_hash=old_hash, new_hash=new_hash, mode=mode)


def _parse_range(range_str: str) -> tuple[int, int]:
    match = _RANGE_RE.fullmatch(range_str)
    if not match:
        raise ParseError(f"Invalid hunk range: `{range_str}`")
    line = int(match.group(1))
    # Span defaults to 1 if omitted (e.g., @@ -1 +1,2 @@)
    span = int(match.group(2)) if match.group(2) is not None else 1
    return line, span


def _parse_hunk_header(header: str) -> HunkHeader:
    """Parse the text after ``@@ `` (the trailing ``@@`` and section are ignored)."""
    ranges = header.split(" @@", 1)[0].split()

    if not ranges or not ranges[0].startswith("-"):
        raise ParseError("Missing old range in hunk header")
    if len(ranges) < 2 or not ranges[1].startswith("+"):
        raise ParseError("Missing new range in hunk header")

    old_line, old_span = _parse_range(ranges[0][1:])
    new_line, new_span = _parse_range(ranges[1][1:])
    return HunkHeader(
        old_line=old_line,
        old_span=old_span,
        new_line=new_line,
        new_span=new_span,
    )


def _parse_file_marker_path(rest: str) -> str:
    """Path from a ---/+++ line, dropping the tab-separated timestamp diff -u adds."""
    return _strip_git_prefix(rest.split("\t", 1)[0])


def _parse_binary_line(rest: str) -> BinaryFileDiffer:
    old_file, sep, tail = rest.partition(" and ")
    if not sep or not tail.endswith(" differ"):
        raise ParseError("Invalid binary files line")
    return BinaryFileDiffer(old_file=old_file, new_file=tail[: -len(" differ")])


def classify_line(line: str) -> Token:
    """Classify one non-empty diff line.

    Raises:
        ParseError: If the line is malformed or matches no known form.
    """
    if line.startswith("diff --git "):
        parts = line[len("diff --git "):].split()
        if len(parts) < 2:
            raise ParseError("Invalid file header")
        return FileHeader(
            old_file=_strip_git_prefix(parts[0]),
            new_file=_strip_git_prefix(parts[1]),
        )

    # File modes
    if line.startswith("deleted file mode "):
        return DeletedFileMode(_parse_octal_mode(line[len("deleted file mode "):]))
    if line.startswith("new file mode "):
        return NewFileMode(_parse_octal_mode(line[len("new file mode "):]))
    if line.startswith("new mode "):
        return NewFileMode(_parse_octal_mode(line[len("new mode "):]))
    if line.startswith("old mode "):
        return OldFileMode(_parse_octal_mode(line[len("old mode "):]))

    # Similarity
    if line.startswith("dissimilarity index "):
        rest = line[len("dissimilarity index "):]
        return Dissimilarity(_parse_percentage(rest, "Invalid dissimilarity"))
    if line.startswith("similarity index "):
        rest = line[len("similarity index "):]
        return Similarity(_parse_percentage(rest, "Invalid similarity"))

    if line.startswith("index "):
        return _parse_index_line(line[len("index "):])

    if line.startswith("--- "):
        return OldFile(_parse_file_marker_path(line[len("--- "):]))
    if line.startswith("+++ "):
        return NewFile(_parse_file_marker_path(line[len("+++ "):]))

    # Renames and copies
    if line.startswith("rename from "):
        return RenameFrom(line[len("rename from "):])
    if line.startswith("rename to "):
        return RenameTo(line[len("rename to "):])
    if line.startswith("copy from "):
        return CopyFrom(line[len("copy from "):])
    if line.startswith("copy to "):
        return CopyTo(line[len("copy to "):])

    if line.startswith("Binary files "):
        return _parse_binary_line(line[len("Binary files "):])

    if line.startswith("@@ "):
        return _parse_hunk_header(line[len("@@ "):])

    # Hunk body
    if line.startswith("-"):
        return Deletion(line[1:])
    if line.startswith("+"):
        return Addition(line[1:])
    if line.startswith(" "):
        return Context(line)
    if line == NO_NEWLINE_MARKER:
        return NoNewline()

    if line.startswith("@"):
        raise ParseError(f"Malformed hunk header: `{line}`")

    raise ParseError(f"Unexpected line: `{line}`")


def _is_body_line(line: str) -> bool:
    """True if classify_line would turn the line into a hunk body Line."""
    if line == NO_NEWLINE_MARKER:
        return True
    if line.startswith("--- ") or line.startswith("+++ "):
        return False
    return line[:1] in ("+", "-", " ")


class Lexer:
    """Iterator of Tokens over diff text.

    ``next()`` returns the next Token, raises ParseError for a malformed
    line, or raises StopIteration at end of input. A malformed line is
    consumed before its error is raised, so iteration can resume after it.

    Blank lines are skipped, except inside a hunk body, where a blank line
    is an empty Context line. After an ``@@`` header the body lasts while
    the header still has lines outstanding on both sides. A body without a
    header lasts while more body lines follow the blank run.

    Example:
        >>> list(Lexer("-old\\n+new\\n"))
        [Deletion(text='old'), Addition(text='new')]
    """

    def __init__(self, source: str) -> None:
        lines = source.split("\n")
        # A trailing newline terminates the last line rather than starting one
        if lines and lines[-1] == "":
            lines.pop()
        self._lines = lines
        self._pos = 0
        self._in_hunk = False
        self._in_body = False
        self._old_remaining = 0
        self._new_remaining = 0

    def __iter__(self) -> "Lexer":
        return self

    def __next__(self) -> Token:
        while self._pos < len(self._lines):
            line = self._lines[self._pos]
            self._pos += 1

            if line == "":
                if self._blank_is_context():
                    token: Token = Context("")
                    self._track(token)
                    return token
                continue

            try:
                token = classify_line(line)
            except ParseError:
                self._reset()
                raise
            self._track(token)
            return token

        raise StopIteration

    def _blank_is_context(self) -> bool:
        if self._in_hunk:
            return self._old_remaining > 0 and self._new_remaining > 0
        if not self._in_body:
            return False
        # Headerless body: the blank run must be followed by another body line
        for line in self._lines[self._pos:]:
            if line:
                return _is_body_line(line)
        return False

    def _reset(self) -> None:
        self._in_hunk = False
        self._in_body = False
        self._old_remaining = self._new_remaining = 0

    def _track(self, token: Token) -> None:
        """Keep count of the body lines the current hunk header still expects."""
        match token:
            case HunkHeader(old_span=old_span, new_span=new_span):
                self._in_hunk = True
                self._in_body = False
                self._old_remaining = old_span
                self._new_remaining = new_span
                return
            case Context():
                self._old_remaining -= 1
                self._new_remaining -= 1
            case Deletion():
                self._old_remaining -= 1
            case Addition():
                self._new_remaining -= 1
            case NoNewline():
                pass
            case _:
                self._reset()
                return
        self._in_body = True
