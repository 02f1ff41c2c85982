"""URL scheme checks for URL-valued attributes."""

from __future__ import annotations

import re
from typing import Collection, Optional

from bleach.sanitizer import ALLOWED_PROTOCOLS

# Same scheme list DOMPurify accepts when no URI pattern is configured
DEFAULT_URL_SCHEMES = frozenset(
    {
        "http", "https", "ftp", "ftps", "mailto", "tel", "callto", "sms",
        "cid", "xmpp", "matrix",
    }
)
STRICT_URL_SCHEMES = frozenset(ALLOWED_PROTOCOLS)

# Media elements that may load inline "data:" sources (QR code images)
DATA_URI_TAGS = frozenset({"img", "image", "audio", "video", "source", "track"})

# Browsers ignore these when resolving a scheme ("java\tscript:" still runs)
_IGNORED_URL_CHARS = re.compile(
    r"[\x00-\x20\x7f-\x9f\u00a0\u1680\u180e\u2000-\u2029\u205f\u3000]+"
)
_SCHEME_PREFIX = re.compile(r"^([^/?#]*):")


def url_scheme(value: str) -> Optional[str]:
    """Return the lowercased scheme of ``value`` or ``None`` for relative URLs."""

    normalized = _IGNORED_URL_CHARS.sub("", value)
    match = _SCHEME_PREFIX.match(normalized)
    if match is None:
        return None
    return match.group(1).lower()


def is_allowed_url(
    value: str, allowed_schemes: Collection[str], allow_data: bool = False
) -> bool:
    """Relative URLs and fragments always pass; absolute ones need an allowed scheme.

    ``allow_data`` additionally admits ``data:`` URLs.
    """

    scheme = url_scheme(value)
    if scheme is None or scheme in allowed_schemes:
        return True
    return allow_data and scheme == "data"
