"""Tests for edit region detection and positional replacement."""

from __future__ import annotations

import pytest

from readmark.text.edits import EditRegion, detect_edit_region, replace_text_at_position


class TestDetectEditRegion:
    """Tests for detect_edit_region."""

    @pytest.mark.parametrize("text", ["", "a", "Hello world", "aaaa", "日本語 😀"])
    def test_identical_text_is_empty_region_at_end(self, text: str) -> None:
        """No change gives a zero-length region at the end of the text."""
        region = detect_edit_region(text, text)
        assert region == EditRegion(start=len(text), end=len(text), original_text="")
        assert region.inserted_text == ""
        assert region.is_noop

    def test_insertion(self) -> None:
        """Inserted words are found between the unchanged prefix and suffix."""
        region = detect_edit_region("Hello world", "Hello brave world")
        assert (region.start, region.end) == (6, 6)
        assert region.inserted_text == "brave "
        assert region.length_delta == 6

    def test_insertion_at_every_index(self) -> None:
        """Inserting text that shares no characters is recovered exactly."""
        base = "abcdef"
        for i in range(len(base) + 1):
            region = detect_edit_region(base, base[:i] + "XYZ" + base[i:])
            assert region.start <= i
            assert region.end <= i
            assert region.inserted_text == "XYZ"
            assert region.deleted_text == ""

    def test_deletion(self) -> None:
        """Deleted text is reported as the original text."""
        region = detect_edit_region("Hello world", "Hello")
        assert (region.start, region.end) == (5, 11)
        assert region.deleted_text == " world"
        assert region.length_delta == -6

    def test_replacement(self) -> None:
        """A replacement reports both sides of the changed window."""
        region = detect_edit_region("Hello there", "Hi there")
        assert (region.start, region.end) == (1, 5)
        assert region.original_text == "ello"
        assert region.inserted_text == "i"

    def test_suffix_never_crosses_prefix(self) -> None:
        """Repeated characters do not produce a negative-width window."""
        region = detect_edit_region("aaa", "aaaa")
        assert region.start == 3
        assert region.end == 3
        assert region.inserted_text == "a"


class TestReplaceTextAtPosition:
    """Tests for replace_text_at_position."""

    def test_replaces_range(self) -> None:
        """The range is replaced and the rest kept."""
        assert replace_text_at_position("Hello", 1, 3, "XY") == "HXYlo"

    def test_insert_at_end(self) -> None:
        """An empty range at the end appends."""
        assert replace_text_at_position("Hello", 5, 5, "!") == "Hello!"

    @pytest.mark.parametrize(("start", "end"), [(-1, 2), (3, 2), (0, 6)])
    def test_invalid_range_raises(self, start: int, end: int) -> None:
        """Out-of-range or reversed positions are rejected."""
        with pytest.raises(ValueError, match="Invalid position range"):
            replace_text_at_position("Hello", start, end, "x")
