"""Build the sanitizer's parse tree with BeautifulSoup.

BeautifulSoup runs on the ``html.parser`` backend, which applies no implied
end tags and no foster parenting: an element closes at its own end tag or at
the end of input, and an end tag with no open match is ignored. Serialized
output therefore re-parses into the same tree.

Nothing here knows about policies; classification happens in
:mod:`.filtering`.
"""

from __future__ import annotations

import warnings
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning
from bs4.builder import HTMLTreeBuilder
from bs4.element import NavigableString, PreformattedString, Tag

from .nodes import Comment, Container, Element, Fragment, append_text

# Inputs such as "https://example.com" are content here, not locators
warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)

PARSER_BACKEND = "html.parser"

# Elements the tree builder closes as soon as they open
VOID_TAGS = frozenset(HTMLTreeBuilder.empty_element_tags)


def make_soup(source: str) -> BeautifulSoup:
    """Parse ``source`` with string attribute values and first-wins duplicates."""

    return BeautifulSoup(
        source,
        PARSER_BACKEND,
        multi_valued_attributes=None,
        on_duplicate_attribute="ignore",
    )


def _attributes(tag: Tag) -> List[Tuple[str, str]]:
    return [
        (name, " ".join(value) if isinstance(value, list) else value)
        for name, value in tag.attrs.items()
    ]


def parse(source: Optional[str]) -> Fragment:
    """Parse ``source`` into a :class:`Fragment`.

    Comments, doctypes, CDATA sections and processing instructions become
    :class:`Comment` nodes; script and style bodies stay single text
    children. The soup is walked with an explicit stack, so nesting depth is
    only bounded later by the filter.
    """

    root = Fragment()
    pending: List[Tuple[Tag, Container]] = [(make_soup(source or ""), root)]

    while pending:
        parent, target = pending.pop()
        for child in parent.contents:
            if isinstance(child, Tag):
                element = Element(child.name, _attributes(child))
                target.children.append(element)
                pending.append((child, element))
            elif isinstance(child, PreformattedString):
                target.children.append(Comment(str(child)))
            elif isinstance(child, NavigableString):
                append_text(target, str(child))

    return root
