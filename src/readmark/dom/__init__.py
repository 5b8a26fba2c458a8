"""DOM selection mapping over selectolax trees."""

from readmark.dom.mapper import (
    DomPoint,
    SelectionRange,
    absolute_to_node,
    dom_to_absolute,
    extract_text,
    get_selection_snapshot,
    iter_text_nodes,
    set_selection,
)

__all__ = [
    "DomPoint",
    "SelectionRange",
    "absolute_to_node",
    "dom_to_absolute",
    "extract_text",
    "get_selection_snapshot",
    "iter_text_nodes",
    "set_selection",
]
