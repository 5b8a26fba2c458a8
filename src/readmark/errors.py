"""Exception types raised by readmark.

Only malformed input raises. Drift and unsafe selection boundaries are
reported as warnings on ``ValidationResult`` and never interrupt the user.
"""

from __future__ import annotations


class ReadmarkError(Exception):
    """Base class for all readmark errors."""


class InvalidEditRegionError(ReadmarkError, ValueError):
    """An edit region has a negative start or ends before it starts."""

    def __init__(self, start: int, end: int) -> None:
        self.start = start
        self.end = end
        super().__init__(f"Invalid edit region: start={start}, end={end}")


class CollapsedSelectionError(ReadmarkError):
    """A non-empty browser selection resolved to a zero-length range.

    Indicates the element/child-index fallback mis-resolved a boundary.
    Callers should treat it as recoverable (ask the user to reselect), not
    as an empty selection.
    """

    def __init__(self, position: int, selected_text: str) -> None:
        self.position = position
        self.selected_text = selected_text
        super().__init__(
            f"Selection of {len(selected_text)} characters collapsed to "
            f"position {position}"
        )
