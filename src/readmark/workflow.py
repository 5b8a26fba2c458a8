"""Editing workflow: select, validate, edit, reconcile, persist.

``EditingSession`` composes the pure pieces in the order a user action
needs them. It holds the current ``TextSpaces`` and marks for one document
and writes changes back through a ``DocumentStoreProtocol``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from readmark.config import ValidationConfig, get_settings
from readmark.dom.mapper import get_selection_snapshot
from readmark.marks.models import Mark
from readmark.marks.reconcile import (
    MarkUpdateResult,
    OverlapResult,
    detect_mark_overlap,
    update_marks,
)
from readmark.selection.validator import SelectionSnapshot, ValidationResult, validate
from readmark.store import StoredDocument
from readmark.text.edits import detect_edit_region, replace_text_at_position
from readmark.text.links import update_link_text
from readmark.text.markers import preserve_selection_through_transform
from readmark.text.spaces import TextSpaces, derive_spaces, splice_cleaned_edit

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from selectolax.lexbor import LexborNode

    from readmark.dom.mapper import SelectionRange
    from readmark.marks.models import ReadRange
    from readmark.store import DocumentStoreProtocol

logger = logging.getLogger(__name__)


class EditingSession:
    """One reader's editing session on one document.

    Args:
        store: Persistence for the document and its marks.
        config: Validation tuning; defaults to ``get_settings().validation``.
    """

    def __init__(
        self,
        store: DocumentStoreProtocol,
        config: ValidationConfig | None = None,
    ) -> None:
        self._store = store
        self.config = config if config is not None else get_settings().validation
        self.spaces: TextSpaces
        self.marks: list[Mark]
        self.reload()

    def reload(self) -> None:
        """Re-read the document and marks from the store."""
        document = self._store.load_document()
        self.spaces = derive_spaces(document.raw, document.excluded_ranges)
        self.marks = self._store.load_marks()

    # --- selection -------------------------------------------------------

    def snapshot_from_dom(
        self, container: LexborNode, selection: SelectionRange | None
    ) -> SelectionSnapshot | None:
        """Capture a DOM selection in every text space.

        Returns None when there is no selection inside *container*.

        Raises:
            CollapsedSelectionError: Propagated from the DOM mapper.
        """
        span = get_selection_snapshot(container, selection)
        if span is None:
            return None
        start, end = span
        return SelectionSnapshot(
            dom_start=start,
            dom_end=end,
            rendered_start=start,
            rendered_end=end,
            cleaned_start=self.spaces.to_cleaned(start),
            cleaned_end=self.spaces.to_cleaned(end),
            selected_text=self.spaces.rendered[start:end],
        )

    def commit_selection(self, snapshot: SelectionSnapshot) -> ValidationResult:
        """Validate and correct *snapshot* against the current document."""
        result = validate(
            snapshot,
            self.spaces.cleaned,
            self.spaces.rendered,
            self.spaces.to_cleaned,
            self.spaces.to_rendered,
            config=self.config,
        )
        for warning in result.warnings:
            logger.debug("Selection warning: %s", warning)
        return result

    def selected_cleaned_text(self, result: ValidationResult) -> str:
        """Cleaned-space text (link syntax intact) under a validated selection."""
        return self.spaces.cleaned[result.cleaned_start : result.cleaned_end]

    # --- marks -----------------------------------------------------------

    def create_mark(
        self, result: ValidationResult, mark_id: int, notes: str | None = None
    ) -> Mark:
        """Persist a new mark over a validated selection."""
        mark = Mark(
            id=mark_id,
            start_position=result.cleaned_start,
            end_position=result.cleaned_end,
            original_text=self.selected_cleaned_text(result),
            notes=notes,
        )
        self.marks = [*self.marks, mark]
        self._store.save_marks(self.marks)
        logger.info(
            "Created mark %d over cleaned [%d, %d)",
            mark.id,
            mark.start_position,
            mark.end_position,
        )
        return mark

    def preview_edit(
        self, start: int, end: int, read_ranges: Sequence[ReadRange] = ()
    ) -> OverlapResult:
        """Which marks and read ranges an edit of cleaned ``[start, end)`` disturbs."""
        return detect_mark_overlap(start, end, self.marks, read_ranges)

    # --- edits -----------------------------------------------------------

    def commit_edit(self, new_cleaned: str) -> MarkUpdateResult:
        """Apply a new cleaned text: splice into raw, reconcile marks, persist.

        A no-op edit persists nothing.
        """
        edit = detect_edit_region(self.spaces.cleaned, new_cleaned)
        if edit.is_noop:
            logger.debug("Edit is a no-op; nothing to persist")
            return MarkUpdateResult(marks=list(self.marks))

        new_raw, new_ranges = splice_cleaned_edit(
            self.spaces, edit.start, edit.end, edit.inserted_text
        )
        result = update_marks(self.marks, edit)

        self._store.save_document(
            StoredDocument(raw=new_raw, excluded_ranges=new_ranges)
        )
        self._store.save_marks(result.marks)

        self.spaces = derive_spaces(new_raw, new_ranges)
        self.marks = result.marks
        logger.info(
            "Committed edit [%d, %d) (%+d chars): %d shifted, %d flagged",
            edit.start,
            edit.end,
            edit.length_delta,
            len(result.shifted),
            len(result.flagged_for_review),
        )
        return result

    def replace_selection(
        self, result: ValidationResult, new_text: str
    ) -> MarkUpdateResult:
        """Replace the cleaned text under a validated selection."""
        new_cleaned = replace_text_at_position(
            self.spaces.cleaned, result.cleaned_start, result.cleaned_end, new_text
        )
        return self.commit_edit(new_cleaned)

    def rename_link(
        self, link_start: int, link_end: int, new_text: str
    ) -> MarkUpdateResult:
        """Change the display text of the link at cleaned ``[link_start, link_end)``.

        Raises:
            ValueError: If the span is not a link.
        """
        new_cleaned = update_link_text(
            self.spaces.cleaned, link_start, link_end, new_text
        )
        return self.commit_edit(new_cleaned)

    def transform_selection(
        self, result: ValidationResult, transform: Callable[[str], str]
    ) -> tuple[int, int]:
        """Rewrite the cleaned text with *transform*, keeping the selection.

        Used for whole-text rewrites such as wrapping the selection in
        emphasis. The rewrite is committed like any other edit.

        Returns:
            The selection's new cleaned ``(start, end)``.
        """
        new_cleaned, start, end = preserve_selection_through_transform(
            self.spaces.cleaned, result.cleaned_start, result.cleaned_end, transform
        )
        self.commit_edit(new_cleaned)
        return start, end
