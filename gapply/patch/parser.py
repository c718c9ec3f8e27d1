"""Parser for unified and extended git diffs.

This module turns the Lexer's token stream into Patch objects, one per
``diff --git`` section, validating hunk line counts as it goes.
"""

import logging
from dataclasses import replace

from gapply.core.errors import ParseError
from gapply.patch.lexer import Lexer
from gapply.patch.types import (
    BinaryFileDiffer,
    CopyFrom,
    CopyTo,
    DeletedFileMode,
    Dissimilarity,
    FileHeader,
    Hunk,
    HunkHeader,
    Index,
    Line,
    NewFile,
    NewFileMode,
    OldFile,
    OldFileMode,
    Patch,
    RenameFrom,
    RenameTo,
    Similarity,
    Token,
)

logger = logging.getLogger(__name__)


class Parser:
    """Iterator of Patch objects over diff text.

    Each ``next()`` parses one patch starting wherever the token stream
    currently is. A malformed line surfaces as a ParseError from ``next()``;
    the offending line has already been consumed, so a later ``next()``
    starts a fresh parse attempt after it.

    Example:
        >>> patches = list(Parser("diff --git a/f b/f\\nold mode 100644\\nnew mode 100755\\n"))
        >>> patches[0].new_mode == 0o100755
        True
    """

    def __init__(self, source: str) -> None:
        self._lexer = Lexer(source)
        self._lookahead: Token | None = None
        self._exhausted = False

    def __iter__(self) -> "Parser":
        return self

    def __next__(self) -> Patch:
        if self._peek() is None:
            raise StopIteration
        return self._parse_patch()

    # --- token cursor ---

    def _peek(self) -> Token | None:
        """Return the next token without consuming it (None at end of input).

        Raises:
            ParseError: If the next line is malformed. The line is consumed.
        """
        if self._lookahead is None and not self._exhausted:
            try:
                self._lookahead = next(self._lexer)
            except StopIteration:
                self._exhausted = True
        return self._lookahead

    def _advance(self) -> Token | None:
        token = self._peek()
        self._lookahead = None
        return token

    # --- grammar ---

    def _parse_patch(self) -> Patch:
        patch = Patch()

        header = self._peek()
        if isinstance(header, FileHeader):
            patch = replace(patch, old_file=header.old_file, new_file=header.new_file)
            self._advance()

        patch = self._parse_metadata(patch)

        hunks: list[Hunk] = []
        while isinstance(self._peek(), HunkHeader):
            hunks.append(self._parse_hunk())

        if not hunks:
            # Body lines given without any @@ header form one implicit hunk
            lines = self._parse_hunk_lines()
            if lines:
                if not patch.old_file and not patch.new_file:
                    raise ParseError("Patch has hunks but no file information")
                old_span, new_span = Hunk(0, 0, 0, 0, lines).compute_counts()
                hunks.append(
                    Hunk(
                        old_line=1 if old_span > 0 else 0,
                        old_span=old_span,
                        new_line=1 if new_span > 0 else 0,
                        new_span=new_span,
                        lines=lines,
                    )
                )

        patch = replace(patch, hunks=tuple(hunks))
        logger.debug(
            "Parsed patch %s -> %s (%d hunks)", patch.old_file, patch.new_file, len(hunks)
        )
        return patch

    def _parse_metadata(self, patch: Patch) -> Patch:
        """Consume extended header lines in any order, recording them on the patch."""
        while True:
            match self._peek():
                case RenameFrom(path=path):
                    patch = replace(patch, rename_from=path)
                case RenameTo(path=path):
                    patch = replace(patch, rename_to=path)
                case CopyFrom(path=path):
                    patch = replace(patch, copy_from=path)
                case CopyTo(path=path):
                    patch = replace(patch, copy_to=path)
                case NewFileMode(mode=mode):
                    patch = replace(patch, new_mode=mode)
                case OldFileMode(mode=mode):
                    patch = replace(patch, old_mode=mode)
                case DeletedFileMode(mode=mode):
                    patch = replace(patch, deleted_file_mode=mode)
                case Similarity(percent=percent):
                    patch = replace(patch, similarity=percent)
                case Dissimilarity(percent=percent):
                    patch = replace(patch, dissimilarity=percent)
                case BinaryFileDiffer():
                    patch = replace(patch, is_binary=True)
                case OldFile(path=path):
                    patch = replace(patch, old_file=path)
                case NewFile(path=path):
                    patch = replace(patch, new_file=path)
                case Index(mode=mode):
                    patch = replace(patch, index_mode=mode)
                case _:
                    return patch
            self._advance()

    def _parse_hunk_lines(self) -> tuple[Line, ...]:
        """Collect a run of body lines."""
        lines: list[Line] = []
        while isinstance(token := self._peek(), Line):
            lines.append(token)
            self._advance()
        return tuple(lines)

    def _parse_hunk(self) -> Hunk:
        header = self._advance()
        if not isinstance(header, HunkHeader):
            raise ParseError("Expected hunk header")

        hunk = Hunk(
            old_line=header.old_line,
            old_span=header.old_span,
            new_line=header.new_line,
            new_span=header.new_span,
            lines=self._parse_hunk_lines(),
        )
        old_count, new_count = hunk.compute_counts()

        if old_count != header.old_span:
            raise ParseError(
                f"Hunk line count mismatch for old file. "
                f"Expected {header.old_span}, got {old_count}"
            )
        if new_count != header.new_span:
            raise ParseError(
                f"Hunk line count mismatch for new file. "
                f"Expected {header.new_span}, got {new_count}"
            )

        return hunk


def parse_patches(text: str) -> list[Patch]:
    """Parse diff text into Patch objects.

    Handles:
    - Git extended format (diff --git, index, mode, rename, copy, similarity)
    - Standard unified diff format (--- a/path, +++ b/path, @@ ... @@)
    - Bare hunk bodies with no @@ header (one implicit hunk)
    - '\\ No newline at end of file' markers
    - /dev/null paths for created and deleted files

    Args:
        text: Diff text to parse

    Returns:
        List of Patch objects, one per file section. Empty for empty text.

    Raises:
        ParseError: On the first malformed line or hunk line count mismatch.
    """
    return list(Parser(text))
