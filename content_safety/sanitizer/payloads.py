"""Sanitization helpers for structured payloads (proposal blocks, form data)."""

from __future__ import annotations

from html import escape
from typing import Any, Dict, Iterable, List, Optional

from .core import sanitize
from .policy import Policy, get_configured_policy


def escape_text(content: Optional[str]) -> str:
    """Escape HTML special characters from raw content."""

    if content is None:
        return ""
    return escape(content)


def sanitize_item(
    item: Dict[str, Any], keys: Iterable[str], policy: Optional[Policy] = None
) -> Dict[str, Any]:
    """Return a copy of ``item`` with the markup fields in ``keys`` sanitized.

    Non-string values are left untouched; missing keys are ignored.
    """

    resolved_policy = policy or get_configured_policy()
    sanitized = item.copy()
    for key in keys:
        value = sanitized.get(key)
        if isinstance(value, str):
            sanitized[key] = sanitize(value, resolved_policy)
    return sanitized


def sanitize_items(
    items: Iterable[Dict[str, Any]],
    keys: Iterable[str],
    policy: Optional[Policy] = None,
) -> List[Dict[str, Any]]:
    """Sanitize the same fields across a list of payloads."""

    field_names = list(keys)
    return [sanitize_item(item, field_names, policy) for item in items]
