"""DOM selection <-> absolute rendered-space position mapping.

Works on selectolax ``LexborNode`` trees: the rendered document as the
reader's browser holds it. A *container* is the element whose text content,
concatenated over all descendant text nodes in document order, equals the
rendered text. A DOM boundary point is ``(node, offset)``:

- for a text node, ``offset`` counts UTF-16 code units into its text, as
  browsers report it;
- for any other node, ``offset`` is a child index meaning "before
  child[offset]" (what browsers report for triple-click and paragraph-edge
  selections).

Absolute positions and ``DomPoint`` offsets are Python string indices; the
conversion happens where a boundary enters or leaves as a ``SelectionRange``.

Node identity is compared by ``mem_id``; selectolax builds a fresh Python
wrapper on every access, so ``is`` and ``==`` are not usable.

Unresolvable references (a node outside the container, an offset past the
end of a text node) are recovered locally and logged; they never raise.
"""

# Pattern: Functional Core (pure reads over a parsed tree)

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from readmark.errors import CollapsedSelectionError
from readmark.text.utf16 import from_utf16_offset, to_utf16_offset, utf16_length

if TYPE_CHECKING:
    from selectolax.lexbor import LexborNode

logger = logging.getLogger(__name__)

# selectolax reports text nodes with this pseudo tag name
_TEXT_TAG = "-text"


@dataclass(frozen=True)
class DomPoint:
    """A DOM boundary point resolved onto a text node.

    ``offset`` is a Python index into the node's text.
    """

    node: LexborNode
    offset: int


@dataclass(frozen=True)
class SelectionRange:
    """A browser Range as reported by the UI layer.

    Attributes:
        start_node: Range.startContainer.
        start_offset: Range.startOffset (UTF-16 code units in a text node).
        end_node: Range.endContainer.
        end_offset: Range.endOffset (UTF-16 code units in a text node).
        text: ``Selection.toString()`` for the range.
        common_ancestor: Range.commonAncestorContainer, when the UI reports
            it. Otherwise the start and end nodes are checked individually.
    """

    start_node: LexborNode
    start_offset: int
    end_node: LexborNode
    end_offset: int
    text: str = ""
    common_ancestor: LexborNode | None = None

    @property
    def is_collapsed(self) -> bool:
        return same_node(self.start_node, self.end_node) and (
            self.start_offset == self.end_offset
        )


# ---------------------------------------------------------------------------
# Node predicates and traversal
# ---------------------------------------------------------------------------


def same_node(a: LexborNode | None, b: LexborNode | None) -> bool:
    """True if *a* and *b* wrap the same underlying DOM node."""
    if a is None or b is None:
        return False
    return a.mem_id == b.mem_id


def is_text_node(node: LexborNode) -> bool:
    return node.tag == _TEXT_TAG


def node_text(node: LexborNode) -> str:
    """Text of a text node; empty for everything else."""
    if not is_text_node(node):
        return ""
    return node.text_content or ""


def child_nodes(node: LexborNode) -> list[LexborNode]:
    """All children (elements, text, comments), like DOM ``childNodes``."""
    children: list[LexborNode] = []
    child = node.child
    while child is not None:
        children.append(child)
        child = child.next
    return children


def iter_text_nodes(container: LexborNode) -> Iterator[LexborNode]:
    """Yield every descendant text node of *container* in document order.

    Whitespace-only text nodes are included; the browser counts them too.
    """
    child = container.child
    while child is not None:
        if is_text_node(child):
            yield child
        else:
            yield from iter_text_nodes(child)
        child = child.next


def text_content(container: LexborNode) -> str:
    """Concatenated text of *container*, equal to DOM ``textContent``."""
    return "".join(node_text(node) for node in iter_text_nodes(container))


def is_within(container: LexborNode, node: LexborNode) -> bool:
    """True if *node* is *container* or one of its descendants."""
    current: LexborNode | None = node
    while current is not None:
        if same_node(current, container):
            return True
        current = current.parent
    return False


# ---------------------------------------------------------------------------
# Element/child-index boundary resolution
# ---------------------------------------------------------------------------


def _split_at_boundary(
    container: LexborNode, parent: LexborNode, index: int
) -> tuple[list[LexborNode], list[LexborNode]] | None:
    """Partition the container's text nodes around "before parent.child[index]".

    Returns (text nodes before the point, text nodes after it), or None if
    *parent* is not inside *container*.
    """
    before: list[LexborNode] = []
    after: list[LexborNode] = []
    found = False

    def _walk(node: LexborNode) -> None:
        nonlocal found
        if is_text_node(node):
            (after if found else before).append(node)
            return
        children = child_nodes(node)
        if same_node(node, parent):
            for i, child in enumerate(children):
                if i == index:
                    found = True
                _walk(child)
            if index >= len(children):
                found = True
            return
        for child in children:
            _walk(child)

    _walk(container)
    if not found:
        return None
    return before, after


def nearest_preceding_text_end(
    container: LexborNode, parent: LexborNode, index: int
) -> DomPoint | None:
    """End of the last non-empty text node before "before child[index]".

    Crosses element and paragraph boundaries; whitespace-only text nodes
    count as text. None when nothing precedes the point.
    """
    split = _split_at_boundary(container, parent, index)
    if split is None:
        return None
    for node in reversed(split[0]):
        text = node_text(node)
        if text:
            return DomPoint(node, len(text))
    return None


def next_text_start(
    container: LexborNode, parent: LexborNode, index: int
) -> DomPoint | None:
    """Start of the first non-empty text node at or after "before child[index]"."""
    split = _split_at_boundary(container, parent, index)
    if split is None:
        return None
    for node in split[1]:
        if node_text(node):
            return DomPoint(node, 0)
    return None


def resolve_boundary(
    container: LexborNode, node: LexborNode, offset: int, *, is_end: bool
) -> DomPoint | None:
    """Resolve any DOM boundary point onto a text node.

    Text nodes resolve to themselves: the UTF-16 *offset* is converted to a
    Python index, clamped to the node's length. For element boundaries the
    direction matters: an *end* boundary "before child N" means right after
    everything preceding child N, so it resolves to the end of the preceding
    text; a *start* boundary resolves to the start of the following text.
    Returns None if the point has no text on the relevant side or lies
    outside *container*.
    """
    if is_text_node(node):
        text = node_text(node)
        length = utf16_length(text)
        if not 0 <= offset <= length:
            logger.warning(
                "Text offset %d outside node of length %d; clamping", offset, length
            )
        return DomPoint(node, from_utf16_offset(text, offset))

    if is_end:
        return nearest_preceding_text_end(container, node, offset)
    return next_text_start(container, node, offset)


# ---------------------------------------------------------------------------
# Public mapping API
# ---------------------------------------------------------------------------


def _text_node_position(container: LexborNode, target: LexborNode) -> int | None:
    """Absolute position of the first character of *target*, if found."""
    position = 0
    for node in iter_text_nodes(container):
        if same_node(node, target):
            return position
        position += len(node_text(node))
    return None


def dom_to_absolute(
    container: LexborNode, node: LexborNode, offset: int, is_end: bool = False
) -> int:
    """Convert a DOM boundary point to an absolute rendered-space position.

    Args:
        container: Element holding the rendered document.
        node: Range container node (text node or element).
        offset: UTF-16 offset (text node) or child index (element).
        is_end: Whether this is the end boundary of a selection.

    Returns:
        Absolute position. Unresolvable points fall back to the start (end
        boundary with nothing before it) or the end of the text.
    """
    total = len(text_content(container))

    if not is_within(container, node):
        logger.warning("Selection node outside container; using end of text")
        return total

    point = resolve_boundary(container, node, offset, is_end=is_end)
    if point is None:
        fallback = 0 if is_end else total
        logger.debug(
            "No text %s element boundary (child %d); resolved to %d",
            "before" if is_end else "after",
            offset,
            fallback,
        )
        return fallback

    start = _text_node_position(container, point.node)
    if start is None:
        logger.warning("Text node not found while walking container; using end")
        return total
    return start + point.offset


def absolute_to_node(
    container: LexborNode, position: int, *, is_end: bool = True
) -> DomPoint | None:
    """Find the text node and in-node offset for an absolute position.

    At the seam between two text nodes an end boundary stays at the end of
    the earlier node, a start boundary (``is_end=False``) moves to the start
    of the next non-empty one. Positions past the end resolve to the end of
    the last text node. Returns None only when the container has no text.
    """
    position = max(0, position)
    current = 0
    last: LexborNode | None = None
    pending: DomPoint | None = None

    for node in iter_text_nodes(container):
        length = len(node_text(node))
        if pending is not None:
            if length:
                return DomPoint(node, 0)
            continue
        last = node
        if current + length >= position:
            point = DomPoint(node, position - current)
            if is_end or point.offset < length:
                return point
            pending = point
        current += length

    if pending is not None:
        return pending
    if last is None:
        return None
    logger.debug("Position %d beyond text length %d; clamping", position, current)
    return DomPoint(last, len(node_text(last)))


def extract_text(container: LexborNode, start: int, end: int) -> str:
    """Substring of the container's text content over ``[start, end)``."""
    return text_content(container)[start:end]


def get_selection_snapshot(
    container: LexborNode, selection: SelectionRange | None
) -> tuple[int, int] | None:
    """Convert the UI's current selection to absolute rendered positions.

    Returns:
        ``(start, end)``, or None when there is no selection or it lies
        outside *container*.

    Raises:
        CollapsedSelectionError: If a selection with visible text resolves to
            ``start == end``. That means a boundary was mis-resolved, not that
            the selection is empty.
    """
    if selection is None:
        return None

    if selection.common_ancestor is not None:
        inside = is_within(container, selection.common_ancestor)
    else:
        inside = is_within(container, selection.start_node) and is_within(
            container, selection.end_node
        )
    if not inside:
        logger.debug("Selection outside container; ignoring")
        return None

    start = dom_to_absolute(
        container, selection.start_node, selection.start_offset, is_end=False
    )
    end = dom_to_absolute(
        container, selection.end_node, selection.end_offset, is_end=True
    )

    if start > end:
        logger.debug("Backward selection %d > %d; swapping", start, end)
        start, end = end, start

    # toString() adds newlines at block edges, so only visible text counts
    if start == end and selection.text.strip():
        raise CollapsedSelectionError(start, selection.text)

    return start, end


def set_selection(
    container: LexborNode, start: int, end: int
) -> SelectionRange | None:
    """Build the range covering absolute ``[start, end)``, e.g. after a re-render.

    The UI layer applies the returned range to the live selection, so its
    offsets are UTF-16 code units. Returns None when the container has no
    text.
    """
    start_point = absolute_to_node(container, start, is_end=False)
    end_point = absolute_to_node(container, end, is_end=True)
    if start_point is None or end_point is None:
        return None
    return SelectionRange(
        start_node=start_point.node,
        start_offset=to_utf16_offset(
            node_text(start_point.node), start_point.offset
        ),
        end_node=end_point.node,
        end_offset=to_utf16_offset(node_text(end_point.node), end_point.offset),
        text=extract_text(container, start, end),
        common_ancestor=container,
    )
