"""Marks and their reconciliation with document edits."""

from readmark.marks.models import Mark, MarkStatus, ReadRange
from readmark.marks.reconcile import (
    MarkUpdateResult,
    OverlapResult,
    detect_mark_overlap,
    update_marks,
)

__all__ = [
    "Mark",
    "MarkStatus",
    "MarkUpdateResult",
    "OverlapResult",
    "ReadRange",
    "detect_mark_overlap",
    "update_marks",
]
