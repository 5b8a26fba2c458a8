"""Tests for UTF-16 offset conversion."""

from __future__ import annotations

import pytest

from readmark.text.utf16 import from_utf16_offset, to_utf16_offset, utf16_length

ASTRAL = "a😀b"


class TestUtf16:
    """Tests for UTF-16 <-> Python index conversion."""

    def test_length_counts_surrogate_pairs(self) -> None:
        """Astral characters are two code units."""
        assert utf16_length(ASTRAL) == 4
        assert utf16_length("abc") == 3
        assert utf16_length("") == 0

    @pytest.mark.parametrize(("index", "offset"), [(0, 0), (1, 1), (2, 3), (3, 4)])
    def test_index_to_offset(self, index: int, offset: int) -> None:
        """Indices after an astral character shift by one unit."""
        assert to_utf16_offset(ASTRAL, index) == offset

    @pytest.mark.parametrize(
        "text", [ASTRAL, "Hello 👋 World", "日本語", "😀😀", ""]
    )
    def test_round_trip(self, text: str) -> None:
        """Every index survives index -> offset -> index."""
        for index in range(len(text) + 1):
            assert from_utf16_offset(text, to_utf16_offset(text, index)) == index

    def test_mid_surrogate_offset_snaps_back(self) -> None:
        """An offset between surrogate halves resolves to the character start."""
        assert from_utf16_offset(ASTRAL, 2) == 1

    def test_out_of_range_offsets_clamp(self) -> None:
        """Offsets outside the text clamp to its ends."""
        assert from_utf16_offset(ASTRAL, -3) == 0
        assert from_utf16_offset(ASTRAL, 99) == 3
        assert to_utf16_offset(ASTRAL, 99) == 4
