"""Shared pytest fixtures for readmark tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from selectolax.lexbor import LexborHTMLParser

from readmark.config import get_settings

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

    from selectolax.lexbor import LexborNode

# A link whose URL contains parentheses, followed by a short sentence.
LINK_DOC = "See [A](http://a.com/(x)) and B."
LINK_DOC_RENDERED = "See A and B."


@pytest.fixture(autouse=True)
def _reset_settings() -> Generator[None]:
    """Keep the cached Settings from leaking between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def parse_container() -> Callable[[str], LexborNode]:
    """Parse an HTML fragment and return the element with ``id="c"``."""

    def _parse(html: str) -> LexborNode:
        tree = LexborHTMLParser(html)
        container = tree.css_first("#c")
        assert container is not None, "fixture HTML needs an element with id='c'"
        return container

    return _parse
