"""Pure text-space primitives: links, spaces, edits and boundaries."""

from readmark.text.edits import EditRegion, detect_edit_region, replace_text_at_position
from readmark.text.links import (
    LinkSpan,
    find_all_links,
    is_position_in_link,
    parse_link_at,
    strip_links,
    update_link_text,
)
from readmark.text.markers import preserve_selection_through_transform
from readmark.text.spaces import (
    TextSpaces,
    cleaned_pos_to_rendered_pos,
    derive_spaces,
    rendered_pos_to_cleaned_pos,
)

__all__ = [
    "EditRegion",
    "LinkSpan",
    "TextSpaces",
    "cleaned_pos_to_rendered_pos",
    "derive_spaces",
    "detect_edit_region",
    "find_all_links",
    "is_position_in_link",
    "parse_link_at",
    "preserve_selection_through_transform",
    "rendered_pos_to_cleaned_pos",
    "replace_text_at_position",
    "strip_links",
    "update_link_text",
]
