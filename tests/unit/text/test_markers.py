"""Tests for carrying a selection through text transforms."""

from __future__ import annotations

import logging

import pytest

from readmark.text.markers import (
    END_MARKER,
    START_MARKER,
    preserve_selection_through_transform,
)


class TestPreserveSelection:
    """Tests for preserve_selection_through_transform."""

    def test_whitespace_collapse(self) -> None:
        """The selection follows its text when earlier whitespace collapses."""
        text, start, end = preserve_selection_through_transform(
            "hello  world", 7, 12, lambda t: " ".join(t.split())
        )
        assert text == "hello world"
        assert text[start:end] == "world"

    def test_identity_transform(self) -> None:
        """An identity transform keeps positions and text."""
        assert preserve_selection_through_transform("abcdef", 2, 4, lambda t: t) == (
            "abcdef",
            2,
            4,
        )

    def test_collapsed_selection(self) -> None:
        """A zero-length selection stays zero-length."""
        text, start, end = preserve_selection_through_transform("abc", 1, 1, str.upper)
        assert (text, start, end) == ("ABC", 1, 1)

    def test_dropped_markers_fall_back(self, caplog: pytest.LogCaptureFixture) -> None:
        """A transform that removes the sentinels clamps the old positions."""

        def _strip(t: str) -> str:
            return t.replace(START_MARKER, "").replace(END_MARKER, "")[:3]

        with caplog.at_level(logging.WARNING, logger="readmark.text.markers"):
            text, start, end = preserve_selection_through_transform(
                "abcdef", 2, 5, _strip
            )
        assert text == "abc"
        assert (start, end) == (2, 3)
        assert "dropped selection markers" in caplog.text
