"""Carry a selection through an arbitrary text transform.

Sentinel characters are spliced in at the selection edges, the transform
runs over the marked text, and the sentinels' new positions become the new
selection. Used when a whole-text rewrite (normalisation, reflow) would
otherwise invalidate a live selection.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)

# Full block / left seven-eighths block: vanishingly rare in prose.
START_MARKER = "█"
END_MARKER = "▉"


def preserve_selection_through_transform(
    text: str,
    start: int,
    end: int,
    transform: Callable[[str], str],
) -> tuple[str, int, int]:
    """Apply *transform* to *text*, tracking the ``[start, end)`` selection.

    Returns:
        ``(transformed_text, new_start, new_end)``. If the transform drops
        either sentinel, the old positions are returned clamped to the new
        text's length.
    """
    start = max(0, min(start, len(text)))
    end = max(start, min(end, len(text)))

    marked = text[:start] + START_MARKER + text[start:end] + END_MARKER + text[end:]
    transformed = transform(marked)

    new_start = transformed.find(START_MARKER)
    new_end = transformed.find(END_MARKER)
    result = transformed.replace(START_MARKER, "", 1).replace(END_MARKER, "", 1)

    if new_start == -1 or new_end == -1:
        logger.warning(
            "Transform dropped selection markers; clamping [%d, %d)", start, end
        )
        return result, min(start, len(result)), min(end, len(result))

    # Removing the start sentinel shifts everything after it left by one
    if new_end > new_start:
        new_end -= 1
    else:
        new_start -= 1
    return result, new_start, new_end
