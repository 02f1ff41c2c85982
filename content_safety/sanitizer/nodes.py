"""Parse tree used by the sanitizer pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple, Union


@dataclass
class Text:
    """Decoded character data."""

    content: str


@dataclass
class Comment:
    """Comment, doctype or other markup declaration. Never serialized."""

    content: str


@dataclass
class Element:
    """Element with attributes in discovery order."""

    tag: str
    attributes: List[Tuple[str, str]] = field(default_factory=list)
    children: List["Node"] = field(default_factory=list)


@dataclass
class Fragment:
    """Implicit root holding the top-level nodes of a parsed input."""

    children: List["Node"] = field(default_factory=list)


Node = Union[Element, Text, Comment]
Container = Union[Element, Fragment]


def append_text(parent: Container, content: str) -> None:
    """Append text to ``parent``, merging with a trailing text node."""

    if not content:
        return
    if parent.children and isinstance(parent.children[-1], Text):
        parent.children[-1].content += content
    else:
        parent.children.append(Text(content))
