"""Unit tests for gapply.patch.applier module."""

import pytest

from gapply.core.constants import DEV_NULL
from gapply.core.errors import ApplyError
from gapply.patch.applier import apply, invert
from gapply.patch.types import Addition, Context, Deletion, Hunk, NoNewline, Patch


def _patch(*hunks: Hunk) -> Patch:
    return Patch(old_file="file.txt", new_file="file.txt", hunks=hunks)


class TestApply:
    """Tests for replaying hunks against source text."""

    def test_apply_simple_patch(self) -> None:
        hunk = Hunk(
            1,
            3,
            1,
            3,
            (
                Context("  context 1"),
                Deletion("old line"),
                Addition("new line"),
                Context("  context 2"),
            ),
        )
        source = "  context 1\nold line\n  context 2\n"

        assert apply(_patch(hunk), source) == "  context 1\nnew line\n  context 2\n"

    def test_no_hunks_returns_source_unchanged(self) -> None:
        """Metadata-only patches keep content byte for byte."""
        assert apply(_patch(), "content") == "content"
        assert apply(_patch(), "") == ""

    def test_only_context_lines(self) -> None:
        hunk = Hunk(1, 3, 1, 3, (Context("a"), Context("b"), Context("c")))

        assert apply(_patch(hunk), "a\nb\nc\n") == "a\nb\nc\n"

    def test_blank_context_lines(self) -> None:
        hunk = Hunk(
            1,
            5,
            1,
            5,
            (
                Context(" line 1"),
                Context(" "),
                Context(" line 3"),
                Deletion("line 4"),
                Addition("new line 4"),
                Context(" line 5"),
            ),
        )
        source = " line 1\n \n line 3\nline 4\n line 5\n"

        assert apply(_patch(hunk), source) == " line 1\n \n line 3\nnew line 4\n line 5\n"

    def test_multiple_hunks_copy_lines_between(self) -> None:
        first = Hunk(
            1, 2, 1, 2, (Deletion("line 1"), Deletion("line 2"), Addition("A"), Addition("B"))
        )
        second = Hunk(4, 1, 4, 1, (Deletion("line 4"), Addition("D")))
        source = "line 1\nline 2\nline 3\nline 4\nline 5\n"

        assert apply(_patch(first, second), source) == "A\nB\nline 3\nD\nline 5\n"

    def test_additions_to_empty_source(self) -> None:
        hunk = Hunk(0, 0, 1, 2, (Addition("line 1"), Addition("line 2")))

        assert apply(_patch(hunk), "") == "line 1\nline 2\n"

    def test_deleting_everything_yields_empty_text(self) -> None:
        hunk = Hunk(1, 2, 0, 0, (Deletion("line 1"), Deletion("line 2")))

        assert apply(_patch(hunk), "line 1\nline 2\n") == ""


class TestTrailingNewline:
    """Tests for '\\ No newline at end of file' handling."""

    def test_removes_trailing_newline(self) -> None:
        hunk = Hunk(
            1,
            2,
            1,
            2,
            (
                Deletion("line1"),
                Deletion("line2"),
                Addition("Line1_Changed"),
                Addition("line2"),
                NoNewline(),
            ),
        )

        assert apply(_patch(hunk), "line1\nline2\n") == "Line1_Changed\nline2"

    def test_adds_trailing_newline(self) -> None:
        """Without a marker on the new side, the result ends with a newline."""
        hunk = Hunk(
            1, 1, 1, 2, (Deletion("hello"), Addition("hello"), Addition("world"))
        )

        assert apply(_patch(hunk), "hello") == "hello\nworld\n"

    def test_old_side_marker_then_additions(self) -> None:
        hunk = Hunk(
            1,
            2,
            1,
            3,
            (
                Deletion("line1"),
                Deletion("line2"),
                NoNewline(),
                Addition("line1"),
                Addition("line2"),
                Addition("line3"),
            ),
        )

        assert apply(_patch(hunk), "line1\nline2") == "line1\nline2\nline3\n"

    def test_marker_where_source_has_trailing_newline(self) -> None:
        """An old-side marker fails when the source still has a line after it."""
        hunk = Hunk(1, 1, 1, 1, (Deletion("hello"), NoNewline(), Addition("world")))

        with pytest.raises(ApplyError) as exc_info:
            apply(_patch(hunk), "hello\n")
        assert exc_info.value.detail == (
            "Patch mismatch at line 2. Expected end of file, Found: ``"
        )

    def test_marker_reports_next_source_line(self) -> None:
        hunk = Hunk(1, 1, 1, 1, (Deletion("a"), NoNewline(), Addition("b")))

        with pytest.raises(ApplyError) as exc_info:
            apply(_patch(hunk), "a\nb\n")
        assert exc_info.value.detail == (
            "Patch mismatch at line 2. Expected end of file, Found: `b`"
        )


class TestApplyErrors:
    """Tests for mismatches between hunks and source."""

    def test_context_mismatch(self) -> None:
        hunk = Hunk(1, 1, 1, 1, (Context("expected line"),))

        with pytest.raises(ApplyError) as exc_info:
            apply(_patch(hunk), "different line")
        assert str(exc_info.value) == (
            "Failed to apply patch: Patch mismatch at line 1. "
            "Expected: `expected line`, Found: `different line`"
        )

    def test_whitespace_is_significant(self) -> None:
        hunk = Hunk(
            1, 2, 1, 2, (Context(" ctx"), Deletion("  deletion line"), Addition("x"))
        )

        with pytest.raises(ApplyError) as exc_info:
            apply(_patch(hunk), " ctx\n   deletion line\n")
        assert exc_info.value.detail == (
            "Patch mismatch at line 2. "
            "Expected: `  deletion line`, Found: `   deletion line`"
        )

    def test_no_offset_search(self) -> None:
        """Hunks are matched only at their stated line."""
        hunk = Hunk(10, 1, 10, 1, (Context("target"),))
        source = "".join(f"line {n}\n" for n in range(1, 11)) + "target\n"

        with pytest.raises(ApplyError) as exc_info:
            apply(_patch(hunk), source)
        assert exc_info.value.detail == (
            "Patch mismatch at line 10. Expected: `target`, Found: `line 10`"
        )

    def test_seek_past_end_of_source(self) -> None:
        hunk = Hunk(5, 1, 5, 1, (Context("x"),))

        with pytest.raises(ApplyError) as exc_info:
            apply(_patch(hunk), "a\nb")
        assert exc_info.value.detail == "Unexpected EOF while seeking to line 5"

    def test_source_exhausted_inside_hunk(self) -> None:
        hunk = Hunk(1, 2, 1, 2, (Context("a"), Context("b")))

        with pytest.raises(ApplyError) as exc_info:
            apply(_patch(hunk), "a")
        assert exc_info.value.detail == (
            "Patch mismatch at line 2. Expected: `b`, Found: `<EOF>`"
        )


class TestInvert:
    """Tests for reverse patches."""

    def test_invert_swaps_sides(self) -> None:
        patch = Patch(
            old_file="old.txt",
            new_file="new.txt",
            hunks=(Hunk(1, 1, 2, 2, (Deletion("a"), Addition("b"), Addition("c"))),),
            rename_from="old.txt",
            rename_to="new.txt",
            old_mode=0o100644,
            new_mode=0o100755,
            similarity=90,
        )

        inverted = invert(patch)

        assert inverted.old_file == "new.txt"
        assert inverted.new_file == "old.txt"
        assert inverted.rename_from == "new.txt"
        assert inverted.rename_to == "old.txt"
        assert inverted.old_mode == 0o100755
        assert inverted.new_mode == 0o100644
        assert inverted.similarity == 90
        assert inverted.hunks == (
            Hunk(2, 2, 1, 1, (Addition("a"), Deletion("b"), Deletion("c"))),
        )

    def test_invert_twice_is_identity(self) -> None:
        patch = Patch(
            old_file="a.txt",
            new_file="b.txt",
            hunks=(Hunk(1, 1, 1, 1, (Deletion("x"), NoNewline(), Addition("y"))),),
            copy_from="a.txt",
            copy_to="b.txt",
            old_mode=0o100644,
            new_mode=0o100755,
        )

        assert invert(invert(patch)) == patch

    def test_inverted_creation_takes_deleted_file_mode(self) -> None:
        patch = Patch(
            old_file=DEV_NULL,
            new_file="f.txt",
            new_mode=0o100755,
            deleted_file_mode=0o100644,
        )

        inverted = invert(patch)

        assert inverted.is_deleted
        assert inverted.new_mode == 0o100644
        assert inverted.old_mode == 0o100755

    def test_reverse_round_trip(self) -> None:
        hunk = Hunk(
            1,
            3,
            1,
            3,
            (Context("c1"), Deletion("old line"), Addition("new line"), Context("c2")),
        )
        patch = _patch(hunk)
        original = "c1\nold line\nc2\n"

        patched = apply(patch, original)

        assert patched == "c1\nnew line\nc2\n"
        assert apply(invert(patch), patched) == original
