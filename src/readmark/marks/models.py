"""Mark (annotation) data model.

Marks are plain frozen dataclasses. Persistence lives behind
``readmark.store.DocumentStoreProtocol``; this module only describes the
fields that survive a round trip through it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class MarkStatus(StrEnum):
    """Lifecycle status of a mark."""

    ACTIVE = "active"
    NEEDS_REVIEW = "needs_review"


@dataclass(frozen=True)
class Mark:
    """A user annotation spanning ``[start_position, end_position)``.

    Positions are in **cleaned** space. While ``status`` is ``active``,
    ``original_text`` equals ``cleaned[start_position:end_position]`` for the
    document version the mark was created against. An overlapping edit flips
    ``status`` to ``needs_review`` and leaves the positions alone.

    Attributes:
        id: Identifier assigned by the annotation store.
        start_position: Inclusive start in cleaned space.
        end_position: Exclusive end in cleaned space.
        original_text: Cleaned-space text the mark was created over.
        status: Active, or awaiting human review after an overlapping edit.
        notes: Reviewer-facing explanation, set when flagged.
    """

    id: int
    start_position: int
    end_position: int
    original_text: str
    status: MarkStatus = MarkStatus.ACTIVE
    notes: str | None = None

    @property
    def length(self) -> int:
        return self.end_position - self.start_position

    def matches(self, cleaned: str) -> bool:
        """True if the mark still covers its original text in *cleaned*."""
        return cleaned[self.start_position : self.end_position] == self.original_text


@dataclass(frozen=True)
class ReadRange:
    """A span of cleaned text the reader has marked as read."""

    start_position: int
    end_position: int
