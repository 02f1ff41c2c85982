"""Content safety helpers for rendering untrusted rich content."""

from .filenames import sanitize_filename
from .rendering import (
    create_template_environment,
    register_template_filters,
    render_safe_html,
    sanitized_markup,
)
from .sanitizer import (
    DEFAULT_POLICY,
    STRICT_POLICY,
    Policy,
    SanitizationReport,
    escape_text,
    get_configured_policy,
    sanitize,
    sanitize_item,
    sanitize_items,
    sanitize_with_report,
)

__all__ = [
    "DEFAULT_POLICY",
    "STRICT_POLICY",
    "Policy",
    "SanitizationReport",
    "create_template_environment",
    "escape_text",
    "get_configured_policy",
    "register_template_filters",
    "render_safe_html",
    "sanitize",
    "sanitize_filename",
    "sanitize_item",
    "sanitize_items",
    "sanitize_with_report",
    "sanitized_markup",
]
