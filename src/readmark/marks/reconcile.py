"""Mark position reconciliation after a document edit.

Every mark is classified against the edit region (in cleaned space):

- **before** the edit (``end_position <= edit.start``): untouched.
- **after** the edit (``start_position >= edit.end``): shifted by the edit's
  length delta.
- **overlapping**: flagged ``needs_review`` with positions unchanged. No
  best-effort re-anchoring is attempted; the text under the mark changed
  and a human decides what the mark should now cover.

Touching a boundary exactly is *outside* the edit (boundaries are exclusive).
Inputs are never mutated, so stale mark snapshots are safe to pass in.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from readmark.errors import InvalidEditRegionError
from readmark.marks.models import Mark, MarkStatus, ReadRange

if TYPE_CHECKING:
    from collections.abc import Sequence

    from readmark.text.edits import EditRegion

logger = logging.getLogger(__name__)

REVIEW_NOTE = "Text was edited in marked region"


@dataclass(frozen=True)
class MarkUpdateResult:
    """Outcome of reconciling marks with one edit."""

    marks: list[Mark]
    shifted: list[int] = field(default_factory=list)
    flagged_for_review: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class OverlapResult:
    """Marks and read ranges split by whether a prospective edit touches them."""

    overlapping: list[Mark]
    safe: list[Mark]
    overlapping_read_ranges: list[ReadRange] = field(default_factory=list)
    safe_read_ranges: list[ReadRange] = field(default_factory=list)

    @property
    def ids_to_delete(self) -> list[int]:
        return [mark.id for mark in self.overlapping]

    @property
    def has_overlap(self) -> bool:
        return bool(self.overlapping or self.overlapping_read_ranges)


def update_marks(
    marks: Sequence[Mark],
    edit: EditRegion,
    inserted_text: str | None = None,
) -> MarkUpdateResult:
    """Update mark positions and statuses after *edit*.

    Args:
        marks: Existing marks, positions in cleaned space of the old text.
        edit: The edited region of the old text.
        inserted_text: Replacement text. Defaults to ``edit.inserted_text``.

    Returns:
        New marks in input order, plus the ids that were shifted and the ids
        flagged for review.

    Raises:
        InvalidEditRegionError: If ``edit.start < 0`` or ``edit.end < edit.start``.
    """
    if edit.start < 0 or edit.end < edit.start:
        raise InvalidEditRegionError(edit.start, edit.end)

    if inserted_text is None:
        inserted_text = edit.inserted_text
    delta = len(inserted_text) - len(edit.original_text)

    updated: list[Mark] = []
    shifted: list[int] = []
    flagged: list[int] = []

    for mark in marks:
        if mark.end_position <= edit.start:
            updated.append(mark)
        elif mark.start_position >= edit.end:
            updated.append(
                dataclasses.replace(
                    mark,
                    start_position=mark.start_position + delta,
                    end_position=mark.end_position + delta,
                )
            )
            shifted.append(mark.id)
        else:
            updated.append(
                dataclasses.replace(
                    mark, status=MarkStatus.NEEDS_REVIEW, notes=REVIEW_NOTE
                )
            )
            flagged.append(mark.id)

    if flagged:
        logger.info(
            "Edit [%d, %d) flagged %d mark(s) for review: %s",
            edit.start,
            edit.end,
            len(flagged),
            flagged,
        )
    logger.debug(
        "Edit [%d, %d) shifted marks %s by %d", edit.start, edit.end, shifted, delta
    )

    return MarkUpdateResult(marks=updated, shifted=shifted, flagged_for_review=flagged)


def _overlaps(edit_start: int, edit_end: int, span: Mark | ReadRange) -> bool:
    if edit_start == edit_end or span.start_position == span.end_position:
        return False
    return span.start_position < edit_end and span.end_position > edit_start


def detect_mark_overlap(
    edit_start: int,
    edit_end: int,
    marks: Sequence[Mark],
    read_ranges: Sequence[ReadRange] = (),
) -> OverlapResult:
    """Partition *marks* by whether an edit of ``[edit_start, edit_end)`` hits them.

    Lets the UI warn before an edit is committed. *read_ranges* are split the
    same way. An empty edit region (pure insertion) or an empty span never
    overlaps.
    """
    overlapping: list[Mark] = []
    safe: list[Mark] = []
    for mark in marks:
        (overlapping if _overlaps(edit_start, edit_end, mark) else safe).append(mark)

    overlapping_ranges: list[ReadRange] = []
    safe_ranges: list[ReadRange] = []
    for read_range in read_ranges:
        hit = _overlaps(edit_start, edit_end, read_range)
        (overlapping_ranges if hit else safe_ranges).append(read_range)

    return OverlapResult(
        overlapping=overlapping,
        safe=safe,
        overlapping_read_ranges=overlapping_ranges,
        safe_read_ranges=safe_ranges,
    )
