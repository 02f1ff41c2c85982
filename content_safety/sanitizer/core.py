"""Public sanitize entry points."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Tuple

import structlog

from .filtering import SanitizationReport, filter_tree
from .parser import parse
from .policy import DEFAULT_POLICY, Policy
from .serializer import serialize

logger = structlog.get_logger(__name__)


def coerce_input(value: Any) -> str:
    """Turn arbitrary caller input into the text that gets parsed."""

    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def sanitize_with_report(
    value: Any, policy: Policy = DEFAULT_POLICY
) -> Tuple[str, SanitizationReport]:
    """Sanitize ``value`` and report what was removed.

    Never raises. Any unexpected failure is logged and yields an empty
    string, so a bug here can only ever over-sanitize.
    """

    report = SanitizationReport()
    try:
        source = coerce_input(value)
        if not source:
            return "", report

        cleaned = serialize(filter_tree(parse(source), policy, report))
    except Exception as exc:  # noqa: BLE001
        logger.error(
            "sanitize_failed",
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return "", report

    if report.modified:
        logger.debug("content_sanitized", **asdict(report))
    return cleaned, report


def sanitize(value: Any, policy: Policy = DEFAULT_POLICY) -> str:
    """Return markup-safe HTML for untrusted ``value`` under ``policy``."""

    return sanitize_with_report(value, policy)[0]
