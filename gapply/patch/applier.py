"""Applier for parsed patches.

Hunks are replayed against the source in a single forward pass. Context and
deletion lines must match the source exactly; there is no offset search and
no fuzz. The whole result is computed in memory before anything is written.
"""

from gapply.core.errors import ApplyError
from gapply.patch.types import Addition, Context, Deletion, NoNewline, Patch


def invert(patch: Patch) -> Patch:
    """Return the patch that reverses ``patch`` (used for reverse application)."""
    return patch.invert()


def apply(patch: Patch, source: str) -> str:
    """Apply a patch to the full text of its source file.

    Args:
        patch: Patch whose hunks are replayed
        source: Current content of the source file ("" for a new file)

    Returns:
        The complete new content. A non-empty result ends with exactly one
        newline unless the last no-newline marker applied to the new side.

    Raises:
        ApplyError: If seeking runs past the end of the source, a context or
            deletion line differs from the source, or a no-newline marker is
            found where the source still has lines.

    Example:
        >>> from gapply.patch.types import Deletion, Addition, Hunk, Patch
        >>> hunk = Hunk(1, 1, 1, 1, (Deletion("old"), Addition("new")))
        >>> apply(Patch("f.txt", "f.txt", (hunk,)), "old\\n")
        'new\\n'
    """
    if not patch.hunks:
        return source

    source_lines = source.split("\n")
    pos = 0  # index of the next unconsumed source line
    result_lines: list[str] = []
    no_newline = False

    for hunk in patch.hunks:
        # Copy everything before the hunk
        while pos + 1 < hunk.old_line:
            if pos >= len(source_lines):
                raise ApplyError(f"Unexpected EOF while seeking to line {hunk.old_line}")
            result_lines.append(source_lines[pos])
            pos += 1

        in_addition_block = False
        for line in hunk.lines:
            match line:
                case Addition(text=text):
                    in_addition_block = True
                    result_lines.append(text)
                    no_newline = False
                case Context(text=text) | Deletion(text=text):
                    in_addition_block = False
                    if pos >= len(source_lines):
                        raise ApplyError(
                            f"Patch mismatch at line {pos + 1}. "
                            f"Expected: `{text}`, Found: `<EOF>`"
                        )
                    found = source_lines[pos]
                    if found != text:
                        raise ApplyError(
                            f"Patch mismatch at line {pos + 1}. "
                            f"Expected: `{text}`, Found: `{found}`"
                        )
                    if isinstance(line, Context):
                        result_lines.append(found)
                        no_newline = False
                    pos += 1
                case NoNewline():
                    if not in_addition_block and pos < len(source_lines):
                        raise ApplyError(
                            f"Patch mismatch at line {pos + 1}. "
                            f"Expected end of file, Found: `{source_lines[pos]}`"
                        )
                    no_newline = True

    result_lines.extend(source_lines[pos:])

    output = "\n".join(result_lines)
    if no_newline:
        if output.endswith("\n"):
            output = output[:-1]
    elif output and not output.endswith("\n"):
        output += "\n"
    return output
