"""Edit region detection and positional text replacement.

The detector is a plain common-prefix / common-suffix diff. It knows
nothing about marks or text spaces: callers diff whichever single space
they edit (the editing workflow diffs cleaned space).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditRegion:
    """The minimal changed span between two versions of a document.

    ``start``/``end`` index the *previous* version; ``original_text`` is
    ``old[start:end]`` and ``inserted_text`` is what replaced it.
    """

    start: int
    end: int
    original_text: str
    inserted_text: str = ""

    @property
    def length_delta(self) -> int:
        return len(self.inserted_text) - len(self.original_text)

    @property
    def is_noop(self) -> bool:
        return not self.original_text and not self.inserted_text

    @property
    def deleted_text(self) -> str:
        return self.original_text


def _common_prefix_length(old: str, new: str) -> int:
    limit = min(len(old), len(new))
    i = 0
    while i < limit and old[i] == new[i]:
        i += 1
    return i


def detect_edit_region(old_text: str, new_text: str) -> EditRegion:
    """Find the minimal ``[start, end)`` window of *old_text* that changed.

    ``start`` is the longest common prefix. The common suffix is then trimmed
    from both strings, but never past ``start`` in either of them.

    Identical strings give a zero-length region at ``len(old_text)``. When the
    inserted text repeats its surroundings, the reported window is the
    leftmost-longest-prefix one (the usual diff ambiguity).

    Examples:
        >>> detect_edit_region("Hello world", "Hello brave world")
        EditRegion(start=6, end=6, original_text='', inserted_text='brave ')
    """
    start = _common_prefix_length(old_text, new_text)

    old_end = len(old_text)
    new_end = len(new_text)
    while (
        old_end > start
        and new_end > start
        and old_text[old_end - 1] == new_text[new_end - 1]
    ):
        old_end -= 1
        new_end -= 1

    region = EditRegion(
        start=start,
        end=old_end,
        original_text=old_text[start:old_end],
        inserted_text=new_text[start:new_end],
    )
    logger.debug(
        "Edit region [%d, %d): -%d +%d chars",
        region.start,
        region.end,
        len(region.original_text),
        len(region.inserted_text),
    )
    return region


def replace_text_at_position(text: str, start: int, end: int, new_text: str) -> str:
    """Replace ``text[start:end]`` with *new_text*.

    Raises:
        ValueError: If the range is negative, reversed or beyond the text.
    """
    if start < 0 or end > len(text) or start > end:
        msg = f"Invalid position range [{start}, {end}) for text of length {len(text)}"
        raise ValueError(msg)
    return text[:start] + new_text + text[end:]
