"""Word and sentence boundary heuristics over rendered text.

Used by the selection validator to snap unsafe selection edges outward.
All functions only ever grow a ``[start, end)`` span; they never shrink it.
"""

from __future__ import annotations

_SENTENCE_TERMINATORS = frozenset(".!?")


def is_whitespace(ch: str) -> bool:
    return ch.isspace()


def is_whitespace_boundary(text: str, pos: int, *, is_end: bool) -> bool:
    """True if a selection edge at *pos* does not split a word.

    A start edge is safe when the character before it is whitespace (or
    there is none); an end edge when the character at it is.
    """
    if is_end:
        return pos >= len(text) or is_whitespace(text[pos])
    return pos <= 0 or is_whitespace(text[pos - 1])


def expand_to_word_boundaries(start: int, end: int, text: str) -> tuple[int, int]:
    """Grow ``[start, end)`` outward until both edges sit next to whitespace."""
    while start > 0 and not is_whitespace(text[start - 1]):
        start -= 1
    while end < len(text) and not is_whitespace(text[end]):
        end += 1
    return start, end


def _is_sentence_start(text: str, pos: int) -> bool:
    """True if *pos* begins a sentence: text start, or after ``[.!?]`` + space."""
    if pos <= 0:
        return True
    return (
        pos >= 2
        and text[pos - 2] in _SENTENCE_TERMINATORS
        and is_whitespace(text[pos - 1])
    )


def find_sentence_start(text: str, pos: int) -> int:
    """Walk back from *pos* to the start of its sentence."""
    pos = max(0, min(pos, len(text)))
    while not _is_sentence_start(text, pos):
        pos -= 1
    return pos


def find_sentence_end(text: str, pos: int) -> int:
    """Walk forward from *pos* to just past the sentence terminator.

    A terminator counts only when followed by whitespace or the end of the
    text. Returns ``len(text)`` when no terminator follows.
    """
    n = len(text)
    pos = max(0, pos)
    while pos < n:
        if text[pos] in _SENTENCE_TERMINATORS and (
            pos + 1 >= n or is_whitespace(text[pos + 1])
        ):
            return pos + 1
        pos += 1
    return n


def expand_to_sentence_boundaries(start: int, end: int, text: str) -> tuple[int, int]:
    """Grow ``[start, end)`` to whole sentences.

    An end edge already sitting just past a terminator is kept.
    """
    new_start = find_sentence_start(text, start)
    if end > 0 and text[end - 1 : end] in _SENTENCE_TERMINATORS:
        new_end = end
    else:
        new_end = find_sentence_end(text, end)
    return new_start, max(new_end, end)

