"""Text spaces: raw, cleaned and rendered views of one document.

- **raw**: the persisted document string.
- **cleaned**: raw with excluded (non-content) ranges cut out. Markdown link
  syntax is intact. Marks are stored in this space.
- **rendered**: cleaned with every ``[text](url)`` replaced by ``text``.
  This is what the reader sees and selects.

Positions from different spaces must never be mixed without conversion.
The converters here are deliberately total: malformed link syntax is simply
not a link, so conversion degrades to identity over it instead of raising.
"""

from __future__ import annotations

import logging
from bisect import bisect_right
from dataclasses import dataclass, field

from readmark.text.links import LinkSpan, find_all_links, strip_links

logger = logging.getLogger(__name__)

Range = tuple[int, int]


@dataclass(frozen=True)
class TextSpaces:
    """The three text spaces derived from one persisted document.

    Recomputed on every load and edit; has no persisted identity.
    """

    raw: str
    cleaned: str
    rendered: str
    excluded_ranges: tuple[Range, ...] = ()
    links: tuple[LinkSpan, ...] = field(default=(), repr=False)

    def to_cleaned(self, rendered_pos: int) -> int:
        """Convert a rendered-space position to cleaned space."""
        return rendered_pos_to_cleaned_pos(rendered_pos, self.cleaned, self.links)

    def to_rendered(self, cleaned_pos: int) -> int:
        """Convert a cleaned-space position to rendered space."""
        return cleaned_pos_to_rendered_pos(cleaned_pos, self.cleaned, self.links)

    def to_raw(self, cleaned_pos: int) -> int:
        """Convert a cleaned-space position to raw space."""
        return cleaned_pos_to_raw_pos(cleaned_pos, self.excluded_ranges)


def normalise_ranges(
    ranges: list[Range] | tuple[Range, ...], length: int
) -> list[Range]:
    """Validate, sort and merge excluded ranges.

    Raises:
        ValueError: For negative, reversed or out-of-bounds ranges. Silently
            clamping here would cut the wrong characters from stored text.
    """
    checked: list[Range] = []
    for start, end in ranges:
        if start < 0 or end < start or end > length:
            msg = f"Invalid excluded range [{start}, {end}) for text of length {length}"
            raise ValueError(msg)
        if start < end:
            checked.append((start, end))

    merged: list[Range] = []
    for start, end in sorted(checked):
        if merged and start <= merged[-1][1]:
            prev_start, prev_end = merged[-1]
            merged[-1] = (prev_start, max(prev_end, end))
        else:
            merged.append((start, end))
    return merged


def remove_excluded_ranges(raw: str, ranges: list[Range] | tuple[Range, ...]) -> str:
    """Cut the ``[start, end)`` ranges out of *raw*."""
    merged = normalise_ranges(ranges, len(raw))
    if not merged:
        return raw

    parts: list[str] = []
    cursor = 0
    for start, end in merged:
        parts.append(raw[cursor:start])
        cursor = end
    parts.append(raw[cursor:])
    return "".join(parts)


def derive_spaces(
    raw: str, excluded_ranges: list[Range] | tuple[Range, ...] = ()
) -> TextSpaces:
    """Derive cleaned and rendered text from a persisted document.

    Args:
        raw: The persisted document string.
        excluded_ranges: Caller-identified ``[start, end)`` raw-space ranges
            that are not content (structural metadata and the like).
    """
    merged = normalise_ranges(excluded_ranges, len(raw))
    cleaned = remove_excluded_ranges(raw, merged)
    links = find_all_links(cleaned)
    rendered = strip_links(cleaned, links)
    logger.debug(
        "Derived spaces: raw=%d cleaned=%d rendered=%d links=%d excluded=%d",
        len(raw),
        len(cleaned),
        len(rendered),
        len(links),
        len(merged),
    )
    return TextSpaces(
        raw=raw,
        cleaned=cleaned,
        rendered=rendered,
        excluded_ranges=tuple(merged),
        links=tuple(links),
    )


# ---------------------------------------------------------------------------
# Rendered <-> cleaned
# ---------------------------------------------------------------------------


def rendered_pos_to_cleaned_pos(
    rendered_pos: int,
    cleaned: str,
    links: list[LinkSpan] | tuple[LinkSpan, ...] | None = None,
) -> int:
    """Convert a rendered-space position to cleaned space.

    - Before a link, or exactly at a link's rendered start: shifted by the
      syntax cost of the preceding links (so a start on a link's first
      display character lands on its ``[``).
    - Strictly inside a link's display text: the matching interior offset
      just past the ``[``.
    - At or after a link's rendered end: shifted past the whole link.
    """
    if links is None:
        links = find_all_links(cleaned)

    cost = 0
    for link in links:
        link_rendered_start = link.start_index - cost
        if rendered_pos <= link_rendered_start:
            break
        link_rendered_end = link_rendered_start + len(link.display_text)
        if rendered_pos < link_rendered_end:
            return link.start_index + 1 + (rendered_pos - link_rendered_start)
        cost += link.syntax_cost
    return rendered_pos + cost


def cleaned_pos_to_rendered_pos(
    cleaned_pos: int,
    cleaned: str,
    links: list[LinkSpan] | tuple[LinkSpan, ...] | None = None,
) -> int:
    """Convert a cleaned-space position to rendered space.

    Links ending at or before *cleaned_pos* contribute their full syntax
    cost. A position inside a link's span maps into the link's display text:
    ``[`` and the display characters map one-to-one, anything in the
    ``](url)`` tail clamps to the display text's end.
    """
    if links is None:
        links = find_all_links(cleaned)

    cost = 0
    for link in links:
        if link.end_index <= cleaned_pos:
            cost += link.syntax_cost
            continue
        if link.start_index < cleaned_pos:
            offset = min(cleaned_pos - link.start_index - 1, len(link.display_text))
            return link.start_index - cost + max(offset, 0)
        break
    return cleaned_pos - cost


# ---------------------------------------------------------------------------
# Cleaned <-> raw
# ---------------------------------------------------------------------------


def cleaned_pos_to_raw_pos(
    cleaned_pos: int, excluded_ranges: list[Range] | tuple[Range, ...]
) -> int:
    """Convert a cleaned-space position to raw space.

    *excluded_ranges* must be normalised (sorted, merged). A position that
    sits exactly where an excluded range was cut maps to the raw position
    before that range.
    """
    raw_pos = cleaned_pos
    for start, end in excluded_ranges:
        if start < raw_pos:
            raw_pos += end - start
        else:
            break
    return raw_pos


def raw_pos_to_cleaned_pos(
    raw_pos: int, excluded_ranges: list[Range] | tuple[Range, ...]
) -> int:
    """Convert a raw-space position to cleaned space.

    Positions inside an excluded range collapse onto the cut point.
    """
    starts = [start for start, _ in excluded_ranges]
    removed = 0
    for start, end in excluded_ranges[: bisect_right(starts, raw_pos)]:
        removed += min(end, raw_pos) - start
    return raw_pos - removed


def excluded_cut_points(excluded_ranges: list[Range] | tuple[Range, ...]) -> list[int]:
    """Cleaned-space positions where each excluded range was cut out."""
    points: list[int] = []
    removed = 0
    for start, end in excluded_ranges:
        points.append(start - removed)
        removed += end - start
    return points


def splice_cleaned_edit(
    spaces: TextSpaces, edit_start: int, edit_end: int, inserted_text: str
) -> tuple[str, tuple[Range, ...]]:
    """Apply a cleaned-space edit to the raw document.

    Excluded content is never touched by a cleaned-space edit: each excluded
    segment is re-inserted into the edited cleaned text at its cut point,
    shifted by the edit. A cut point strictly inside the replaced span moves
    to just after the inserted text.

    Returns:
        ``(new_raw, new_excluded_ranges)``.

    Raises:
        ValueError: If the edit range does not fit the cleaned text.
    """
    if edit_start < 0 or edit_end < edit_start or edit_end > len(spaces.cleaned):
        msg = (
            f"Invalid edit range [{edit_start}, {edit_end}) for cleaned text of "
            f"length {len(spaces.cleaned)}"
        )
        raise ValueError(msg)

    new_cleaned = (
        spaces.cleaned[:edit_start] + inserted_text + spaces.cleaned[edit_end:]
    )
    delta = len(inserted_text) - (edit_end - edit_start)

    parts: list[str] = []
    new_ranges: list[Range] = []
    cursor = 0
    raw_len = 0
    for (start, end), cut in zip(
        spaces.excluded_ranges, excluded_cut_points(spaces.excluded_ranges), strict=True
    ):
        if cut <= edit_start:
            new_cut = cut
        elif cut >= edit_end:
            new_cut = cut + delta
        else:
            new_cut = edit_start + len(inserted_text)
            logger.debug("Excluded range at cut %d moved to %d by edit", cut, new_cut)
        segment = new_cleaned[cursor:new_cut]
        parts.append(segment)
        raw_len += len(segment)
        parts.append(spaces.raw[start:end])
        new_ranges.append((raw_len, raw_len + end - start))
        raw_len += end - start
        cursor = new_cut
    parts.append(new_cleaned[cursor:])
    return "".join(parts), tuple(new_ranges)
