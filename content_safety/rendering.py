"""Template helpers that render untrusted markup through the sanitizer."""

from __future__ import annotations

from typing import Any, Optional

import structlog
from jinja2 import BaseLoader, Environment, select_autoescape
from markupsafe import Markup

from .sanitizer import Policy, get_configured_policy, sanitize

logger = structlog.get_logger(__name__)

SAFE_HTML_FILTER = "safe_html"
SAFE_HTML_BLOCK_FILTER = "safe_html_block"


def _resolve_policy(policy: Optional[Policy]) -> Policy:
    return policy or get_configured_policy()


def sanitized_markup(html: Any, policy: Optional[Policy] = None) -> Markup:
    """Sanitize ``html`` and mark the result safe for autoescaping templates."""

    return Markup(sanitize(html, _resolve_policy(policy)))


def render_safe_html(
    html: Any, class_name: str = "", policy: Optional[Policy] = None
) -> Markup:
    """Server-side counterpart of the ``SafeHTML`` component.

    Wraps the sanitized content in a ``div``; ``class_name`` is escaped and
    the ``class`` attribute is left out when it is empty.
    """

    clean = sanitized_markup(html, policy)
    if class_name:
        return Markup('<div class="{}">{}</div>').format(class_name, clean)
    return Markup("<div>{}</div>").format(clean)


def register_template_filters(
    environment: Environment, policy: Optional[Policy] = None
) -> Environment:
    """Add the ``safe_html`` and ``safe_html_block`` filters to ``environment``."""

    def safe_html(value: Any) -> Markup:
        return sanitized_markup(value, policy)

    def safe_html_block(value: Any, class_name: str = "") -> Markup:
        return render_safe_html(value, class_name, policy)

    environment.filters[SAFE_HTML_FILTER] = safe_html
    environment.filters[SAFE_HTML_BLOCK_FILTER] = safe_html_block
    return environment


def create_template_environment(
    loader: Optional[BaseLoader] = None, policy: Optional[Policy] = None
) -> Environment:
    """Create an autoescaping Jinja2 environment with the sanitizer filters."""

    try:
        environment = Environment(
            loader=loader, autoescape=select_autoescape(["html", "xml"], default=True)
        )
        return register_template_filters(environment, policy)
    except Exception as exc:  # noqa: BLE001
        logger.error("template_env_init_failed", error=str(exc))
        raise
