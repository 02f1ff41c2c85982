"""Render a filtered tree back to markup."""

from __future__ import annotations

from html import escape
from typing import List

from .nodes import Element, Fragment, Node, Text
from .parser import VOID_TAGS


def _write_node(node: Node, out: List[str]) -> None:
    if isinstance(node, Text):
        out.append(escape(node.content))
        return
    if not isinstance(node, Element):
        return

    out.append("<")
    out.append(node.tag)
    for name, value in node.attributes:
        out.append(f' {name}="{escape(value)}"')
    out.append(">")

    if node.tag.lower() in VOID_TAGS:
        return
    for child in node.children:
        _write_node(child, out)
    out.append(f"</{node.tag}>")


def serialize(fragment: Fragment) -> str:
    """Serialize ``fragment`` with every text node and attribute value escaped."""

    out: List[str] = []
    for node in fragment.children:
        _write_node(node, out)
    return "".join(out)
