"""Normalization of user-supplied upload filenames."""

from __future__ import annotations

import re
import time
import unicodedata
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

_WHITESPACE_RUN = re.compile(r"\s+")
_DISALLOWED_CHARS = re.compile(r"[^a-z0-9.-]")


def sanitize_filename(filename: Any) -> str:
    """Return a storage-safe filename.

    Accents are stripped (NFD decomposition minus combining marks), the
    result is lowercased, whitespace runs become ``-`` and anything outside
    ``[a-z0-9.-]`` is removed. Non-string input yields a timestamped
    placeholder name instead of raising.
    """

    if not isinstance(filename, str):
        logger.warning(
            "invalid_filename_type", received_type=type(filename).__name__
        )
        return f"invalid_filename_{int(time.time() * 1000)}"

    decomposed = unicodedata.normalize("NFD", filename)
    without_accents = "".join(
        char for char in decomposed if not unicodedata.combining(char)
    )
    collapsed = _WHITESPACE_RUN.sub("-", without_accents.lower())
    return _DISALLOWED_CHARS.sub("", collapsed)
