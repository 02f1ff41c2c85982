"""Policy enforcement over the parse tree."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .nodes import Comment, Container, Element, Fragment, Node, Text, append_text
from .policy import Policy


@dataclass
class SanitizationReport:
    """Counters describing what a single sanitize call removed."""

    dropped_subtrees: int = 0
    unwrapped_tags: int = 0
    stripped_attributes: int = 0
    dropped_comments: int = 0
    truncated_tags: int = 0

    @property
    def modified(self) -> bool:
        return any(
            (
                self.dropped_subtrees,
                self.unwrapped_tags,
                self.stripped_attributes,
                self.dropped_comments,
                self.truncated_tags,
            )
        )


def _filter_attributes(
    tag: str,
    attributes: List[Tuple[str, str]],
    policy: Policy,
    report: SanitizationReport,
) -> List[Tuple[str, str]]:
    kept: List[Tuple[str, str]] = []
    for name, value in attributes:
        output_name = policy.allowed_attribute_name(name)
        if output_name is None or not policy.allows_attribute_value(tag, name, value):
            report.stripped_attributes += 1
            continue
        kept.append((output_name, value))
    return kept


def _flatten(
    element: Element, policy: Policy, report: SanitizationReport, into: Container
) -> None:
    """Keep only the text below an element nested past ``policy.max_depth``.

    Forbidden descendants still go with their whole subtree. Iterative, since
    the structure below the limit can be arbitrarily deep.
    """

    pending: List[Node] = [element]
    while pending:
        node = pending.pop()
        if isinstance(node, Text):
            append_text(into, node.content)
        elif isinstance(node, Comment):
            report.dropped_comments += 1
        elif policy.is_forbidden_tag(node.tag):
            report.dropped_subtrees += 1
        else:
            report.truncated_tags += 1
            pending.extend(reversed(node.children))


def _filter_children(
    children: List[Node],
    policy: Policy,
    report: SanitizationReport,
    into: Container,
    depth: int,
) -> None:
    """Append the filtered form of ``children`` (nested at ``depth``) to ``into``."""

    for node in children:
        if isinstance(node, Text):
            append_text(into, node.content)
        elif isinstance(node, Comment):
            report.dropped_comments += 1
        elif policy.is_forbidden_tag(node.tag):
            report.dropped_subtrees += 1
        elif depth > policy.max_depth:
            _flatten(node, policy, report, into)
        else:
            tag = policy.allowed_tag_name(node.tag)
            if tag is None:
                report.unwrapped_tags += 1
                _filter_children(node.children, policy, report, into, depth + 1)
                continue
            element = Element(
                tag, _filter_attributes(node.tag, node.attributes, policy, report)
            )
            into.children.append(element)
            _filter_children(node.children, policy, report, element, depth + 1)


def filter_tree(
    fragment: Fragment, policy: Policy, report: SanitizationReport | None = None
) -> Fragment:
    """Return a new fragment holding only what ``policy`` admits.

    Forbidden elements are dropped with their subtree, other elements that
    are not allowed are unwrapped, comments are always dropped. Elements
    nested deeper than ``policy.max_depth`` (counted in the input tree) are
    flattened to their text.
    """

    cleaned = Fragment()
    _filter_children(
        fragment.children, policy, report or SanitizationReport(), cleaned, 1
    )
    return cleaned
