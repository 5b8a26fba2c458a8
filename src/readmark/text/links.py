"""Markdown link tokenizer.

Parses ``[text](url)`` links where link text may contain brackets
(``[[text]]``) and URLs may contain balanced parentheses
(``https://en.wikipedia.org/wiki/Name_(disambiguation)``).

This is the shared primitive for every link-boundary decision: stripping
links to produce rendered text, converting positions between cleaned and
rendered space, and keeping selection edges out of link syntax.
"""

# Pattern: Functional Core (pure functions over immutable strings)

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinkSpan:
    """A markdown link located in cleaned text.

    Attributes:
        display_text: Text between the outer brackets, shown to the reader.
        url: Text between the outer parentheses.
        start_index: Index of the opening ``[``.
        end_index: Index just past the closing ``)``.
    """

    display_text: str
    url: str
    start_index: int
    end_index: int

    @property
    def length(self) -> int:
        return self.end_index - self.start_index

    @property
    def syntax_cost(self) -> int:
        """Characters removed when the link is rendered as its display text."""
        return self.length - len(self.display_text)

    def contains(self, pos: int) -> bool:
        """True if *pos* is strictly inside the link's span."""
        return self.start_index < pos < self.end_index


def _scan_link_text(text: str, i: int) -> tuple[str, int] | None:
    """Scan link text from just after ``[``.

    Returns (link_text, index_of_open_paren) or None when the bracketed
    text is not followed by ``(``.
    """
    n = len(text)
    chars: list[str] = []
    while i < n:
        ch = text[i]
        if ch != "]":
            chars.append(ch)
            i += 1
            continue
        nxt = text[i + 1] if i + 1 < n else ""
        if nxt == "(":
            return "".join(chars), i + 1
        if nxt == "]":
            # [[text]]: the first ] belongs to the link text
            chars.append(ch)
            i += 1
            continue
        # Bare [Bracketed] token. Consuming on would swallow everything up
        # to the next real link.
        return None
    return None


def _scan_url(text: str, i: int) -> tuple[str, int] | None:
    """Scan a URL from just after ``(``, tracking parenthesis depth.

    Returns (url, index_of_closing_paren) or None if truncated.
    """
    n = len(text)
    depth = 0
    start = i
    while i < n:
        ch = text[i]
        if ch == "(":
            depth += 1
        elif ch == ")":
            if depth == 0:
                return text[start:i], i
            depth -= 1
        i += 1
    return None


def parse_link_at(text: str, i: int) -> LinkSpan | None:
    """Parse a markdown link starting exactly at index *i*.

    Args:
        text: Text to scan (cleaned space).
        i: Index expected to hold ``[``.

    Returns:
        The parsed LinkSpan, or None if there is no complete link at *i*.
        No partial or guessed matches are returned.
    """
    if i < 0 or i >= len(text) or text[i] != "[":
        return None

    scanned = _scan_link_text(text, i + 1)
    if scanned is None:
        return None
    display_text, paren = scanned

    url_scan = _scan_url(text, paren + 1)
    if url_scan is None:
        return None
    url, close = url_scan

    return LinkSpan(
        display_text=display_text,
        url=url,
        start_index=i,
        end_index=close + 1,
    )


def find_all_links(text: str) -> list[LinkSpan]:
    """Find every markdown link in *text*, in document order.

    Jumps past each match, so characters are examined at most once per
    successful parse and link spans never overlap.
    """
    links: list[LinkSpan] = []
    n = len(text)
    i = text.find("[")
    while 0 <= i < n:
        link = parse_link_at(text, i)
        if link is not None:
            links.append(link)
            i = text.find("[", link.end_index)
        else:
            i = text.find("[", i + 1)
    return links


def strip_links(text: str, links: list[LinkSpan] | None = None) -> str:
    """Replace each link with its display text, leaving other text untouched.

    Example: ``"see [docs](http://x) now"`` becomes ``"see docs now"``.
    """
    if links is None:
        links = find_all_links(text)
    if not links:
        return text

    parts: list[str] = []
    cursor = 0
    for link in links:
        parts.append(text[cursor : link.start_index])
        parts.append(link.display_text)
        cursor = link.end_index
    parts.append(text[cursor:])
    return "".join(parts)


def link_containing(pos: int, links: list[LinkSpan]) -> LinkSpan | None:
    """Return the link whose span strictly contains *pos*, if any."""
    for link in links:
        if link.start_index >= pos:
            return None
        if link.contains(pos):
            return link
    return None


def is_position_in_link(pos: int, text: str) -> bool:
    """True iff *pos* lies strictly inside some link's ``[ ... )`` span.

    Positions exactly on the opening ``[`` or just past the closing ``)``
    are link boundaries and therefore safe selection edges.
    """
    return link_containing(pos, find_all_links(text)) is not None


def update_link_text(text: str, link_start: int, link_end: int, new_text: str) -> str:
    """Replace the display text of the link at ``[link_start, link_end)``.

    The URL is kept as-is.

    Raises:
        ValueError: If the span does not hold exactly one markdown link.
    """
    link = parse_link_at(text, link_start)
    if link is None or link.end_index != link_end:
        msg = f"Invalid link syntax at positions {link_start}-{link_end}"
        raise ValueError(msg)

    logger.debug(
        "Updating link text %r -> %r at %d", link.display_text, new_text, link_start
    )
    return f"{text[:link_start]}[{new_text}]({link.url}){text[link_end:]}"
