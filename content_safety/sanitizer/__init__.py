"""Allow-list HTML sanitizer package."""

from .core import sanitize, sanitize_with_report
from .filtering import SanitizationReport
from .policy import (
    DEFAULT_POLICY,
    STRICT_POLICY,
    Policy,
    get_configured_policy,
)
from .payloads import escape_text, sanitize_item, sanitize_items

__all__ = [
    "DEFAULT_POLICY",
    "STRICT_POLICY",
    "Policy",
    "SanitizationReport",
    "escape_text",
    "get_configured_policy",
    "sanitize",
    "sanitize_item",
    "sanitize_items",
    "sanitize_with_report",
]
