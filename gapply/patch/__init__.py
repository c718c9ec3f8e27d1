"""Patch module for lexing, parsing, and applying git-style diffs.

Main components:
- Types: Token variants, Hunk, Patch - structured representation of diffs
- Lexer: Lexer - diff text to one token per line
- Parser: Parser / parse_patches() - tokens to Patch objects
- Applier: apply() / invert() - replay a patch against file content
- Orchestrator: apply_patch_text() - apply a patch stream through a FileSystem

Example usage:
    >>> from gapply.patch import parse_patches, apply
    >>> diff_text = '''\\
    ... diff --git a/file.txt b/file.txt
    ... --- a/file.txt
    ... +++ b/file.txt
    ... @@ -1,2 +1,2 @@
    ... -line1
    ... +new_line
    ...  line2
    ... '''
    >>> patches = parse_patches(diff_text)
    >>> apply(patches[0], "line1\\n line2\\n")
    'new_line\\n line2\\n'
"""

from gapply.patch.applier import apply, invert
from gapply.patch.lexer import Lexer
from gapply.patch.orchestrator import (
    ChangeKind,
    FileChange,
    apply_patch_text,
    apply_single_patch,
)
from gapply.patch.parser import Parser, parse_patches
from gapply.patch.types import (
    Addition,
    Context,
    Deletion,
    Hunk,
    Line,
    NoNewline,
    Patch,
    Token,
)

__all__ = [
    # Types
    "Token",
    "Line",
    "Addition",
    "Deletion",
    "Context",
    "NoNewline",
    "Hunk",
    "Patch",
    # Lexer / Parser
    "Lexer",
    "Parser",
    "parse_patches",
    # Applier
    "apply",
    "invert",
    # Orchestrator
    "ChangeKind",
    "FileChange",
    "apply_patch_text",
    "apply_single_patch",
]
