"""UTF-16 offset conversion.

Browsers report selection offsets in UTF-16 code units, so characters
outside the Basic Multilingual Plane (most emoji, some CJK extensions) count
twice. Python indexes strings by code point. Positions arriving from, or
going back to, the UI layer pass through these helpers; everything inside
readmark works in Python indices.

Examples:
    "Hello 👋 World": the emoji is Python index 6 but UTF-16 offsets 6-7,
    so "W" is Python index 8 and UTF-16 offset 9.
"""

from __future__ import annotations

_BMP_LIMIT = 0xFFFF


def _units(ch: str) -> int:
    return 2 if ord(ch) > _BMP_LIMIT else 1


def utf16_length(text: str) -> int:
    """Length of *text* in UTF-16 code units (JavaScript ``.length``)."""
    return len(text) + sum(1 for ch in text if ord(ch) > _BMP_LIMIT)


def to_utf16_offset(text: str, index: int) -> int:
    """Convert a Python string index to a UTF-16 code-unit offset.

    *index* is clamped to ``[0, len(text)]``.
    """
    index = max(0, min(index, len(text)))
    return utf16_length(text[:index])


def from_utf16_offset(text: str, offset: int) -> int:
    """Convert a UTF-16 code-unit offset to a Python string index.

    An offset pointing between the two halves of a surrogate pair snaps back
    to the start of that character. Offsets beyond the text clamp to
    ``len(text)``.
    """
    if offset <= 0:
        return 0
    units = 0
    for index, ch in enumerate(text):
        width = _units(ch)
        if units + width > offset:
            return index
        units += width
        if units == offset:
            return index + 1
    return len(text)
