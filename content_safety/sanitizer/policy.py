"""Allow-list sanitization policy and the process-wide defaults."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from functools import lru_cache
from typing import Collection, Dict, FrozenSet, Iterable, Optional, Tuple

import structlog

from .. import settings
from .urls import (
    DATA_URI_TAGS,
    DEFAULT_URL_SCHEMES,
    STRICT_URL_SCHEMES,
    is_allowed_url,
)

logger = structlog.get_logger(__name__)

DATA_ATTRIBUTE_PREFIX = "data-"
EVENT_HANDLER_PREFIX = "on"

DEFAULT_MAX_DEPTH = 256
# Filtering and serializing recurse once per nesting level
MAX_SUPPORTED_DEPTH = 512

DEFAULT_URL_ATTRIBUTES = frozenset({"href", "src", "xlink:href"})

# Browsers never decode entities inside these, so escaped text would not
# survive a second pass. They can be unwrapped or forbidden, never emitted.
RAW_TEXT_TAGS = frozenset(
    {"script", "style", "iframe", "xmp", "noembed", "noframes", "noscript", "plaintext"}
)

DEFAULT_ALLOWED_TAGS = (
    # basic HTML
    "a", "b", "strong", "i", "em", "u", "p", "br", "ul", "ol", "li",
    "blockquote", "hr", "h1", "h2", "h3", "h4", "h5", "h6", "span", "div",
    "img", "table", "thead", "tbody", "tr", "th", "td", "pre", "code",
    # inline SVG (QR codes, icons)
    "svg", "g", "path", "rect", "circle", "line", "polyline", "polygon",
    "defs", "clipPath", "mask", "title", "desc", "use",
)

DEFAULT_ALLOWED_ATTRIBUTES = (
    "href", "target", "rel", "src", "alt", "title", "width", "height",
    "class", "id",
    # SVG geometry and presentation
    "viewBox", "fill", "stroke", "stroke-width", "stroke-linecap",
    "stroke-linejoin", "d", "x", "y", "cx", "cy", "r", "x1", "y1", "x2",
    "y2", "points", "transform", "preserveAspectRatio", "xmlns",
    "xmlns:xlink", "version", "aria-hidden", "focusable", "role", "opacity",
    # <use>
    "xlink:href",
)

DEFAULT_FORBIDDEN_TAGS = (
    "script", "iframe", "object", "embed", "link", "meta", "form", "input",
    "button", "textarea", "select",
)

DEFAULT_FORBIDDEN_ATTRIBUTES = (
    "onerror", "onload", "onclick", "onmouseover", "onfocus",
    "onpointerover", "style",
)


def _canonical_names(names: Iterable[str], excluded: Collection[str]) -> Dict[str, str]:
    """Map lowercased names to their allow-list spelling, skipping ``excluded``."""

    mapping: Dict[str, str] = {}
    for name in sorted(names):
        key = name.lower()
        if key in excluded:
            continue
        mapping.setdefault(key, name)
    return mapping


@dataclass(frozen=True)
class Policy:
    """Immutable allow-list policy.

    Matching is ASCII case-insensitive and forbidden entries always win over
    allowed ones. Allowed names are emitted with the spelling used here,
    which keeps SVG camel case (``clipPath``, ``viewBox``) stable.
    """

    allowed_tags: FrozenSet[str]
    allowed_attributes: FrozenSet[str]
    forbidden_tags: FrozenSet[str] = frozenset()
    forbidden_attributes: FrozenSet[str] = frozenset()
    allow_data_attributes: bool = False
    forbidden_attribute_prefixes: Tuple[str, ...] = (EVENT_HANDLER_PREFIX,)
    max_depth: int = DEFAULT_MAX_DEPTH
    allowed_url_schemes: Optional[FrozenSet[str]] = DEFAULT_URL_SCHEMES
    url_attributes: FrozenSet[str] = DEFAULT_URL_ATTRIBUTES
    data_uri_tags: FrozenSet[str] = DATA_URI_TAGS

    _tag_names: Dict[str, str] = field(init=False, repr=False, compare=False)
    _attribute_names: Dict[str, str] = field(init=False, repr=False, compare=False)
    _forbidden_tag_keys: FrozenSet[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for name in (
            "allowed_tags",
            "allowed_attributes",
            "forbidden_tags",
            "forbidden_attributes",
            "url_attributes",
        ):
            object.__setattr__(self, name, frozenset(getattr(self, name)))
        object.__setattr__(
            self, "data_uri_tags", frozenset(tag.lower() for tag in self.data_uri_tags)
        )

        object.__setattr__(
            self,
            "forbidden_attribute_prefixes",
            tuple(prefix.lower() for prefix in self.forbidden_attribute_prefixes),
        )
        if self.allowed_url_schemes is not None:
            object.__setattr__(
                self,
                "allowed_url_schemes",
                frozenset(scheme.lower() for scheme in self.allowed_url_schemes),
            )

        depth = max(1, min(int(self.max_depth), MAX_SUPPORTED_DEPTH))
        if depth != self.max_depth:
            logger.warning(
                "policy_max_depth_clamped", requested=self.max_depth, effective=depth
            )
            object.__setattr__(self, "max_depth", depth)

        forbidden_tag_keys = frozenset(tag.lower() for tag in self.forbidden_tags)
        forbidden_attribute_keys = frozenset(
            attribute.lower() for attribute in self.forbidden_attributes
        )
        refused = sorted(
            tag
            for tag in self.allowed_tags
            if tag.lower() in RAW_TEXT_TAGS and tag.lower() not in forbidden_tag_keys
        )
        if refused:
            logger.warning("raw_text_tags_not_allowed", tags=refused)

        object.__setattr__(self, "_forbidden_tag_keys", forbidden_tag_keys)
        object.__setattr__(
            self,
            "_tag_names",
            _canonical_names(self.allowed_tags, forbidden_tag_keys | RAW_TEXT_TAGS),
        )
        object.__setattr__(
            self,
            "_attribute_names",
            _canonical_names(self.allowed_attributes, forbidden_attribute_keys),
        )

    def is_forbidden_tag(self, tag: str) -> bool:
        return tag.lower() in self._forbidden_tag_keys

    def allowed_tag_name(self, tag: str) -> Optional[str]:
        """Return the output spelling for ``tag`` or ``None`` when it is not allowed."""

        return self._tag_names.get(tag.lower())

    def allowed_attribute_name(self, name: str) -> Optional[str]:
        """Return the output spelling for attribute ``name`` or ``None`` to strip it."""

        key = name.lower()
        if key.startswith(self.forbidden_attribute_prefixes):
            return None
        if not self.allow_data_attributes and key.startswith(DATA_ATTRIBUTE_PREFIX):
            return None
        return self._attribute_names.get(key)

    def allows_attribute_value(self, tag: str, name: str, value: str) -> bool:
        """Apply URL scheme checking to URL-valued attributes when enabled.

        ``data:`` URLs pass only on the media elements in ``data_uri_tags``.
        """

        if self.allowed_url_schemes is None:
            return True
        if name.lower() not in self.url_attributes:
            return True
        return is_allowed_url(
            value,
            self.allowed_url_schemes,
            allow_data=tag.lower() in self.data_uri_tags,
        )

    def extend(
        self,
        *,
        allowed_tags: Iterable[str] = (),
        allowed_attributes: Iterable[str] = (),
        forbidden_tags: Iterable[str] = (),
        forbidden_attributes: Iterable[str] = (),
        **changes,
    ) -> "Policy":
        """Return a copy with the given names added to each set.

        Remaining keyword arguments replace scalar fields such as
        ``max_depth`` or ``allow_data_attributes``.
        """

        return replace(
            self,
            allowed_tags=self.allowed_tags | frozenset(allowed_tags),
            allowed_attributes=self.allowed_attributes | frozenset(allowed_attributes),
            forbidden_tags=self.forbidden_tags | frozenset(forbidden_tags),
            forbidden_attributes=self.forbidden_attributes
            | frozenset(forbidden_attributes),
            **changes,
        )


DEFAULT_POLICY = Policy(
    allowed_tags=frozenset(DEFAULT_ALLOWED_TAGS),
    allowed_attributes=frozenset(DEFAULT_ALLOWED_ATTRIBUTES),
    forbidden_tags=frozenset(DEFAULT_FORBIDDEN_TAGS),
    forbidden_attributes=frozenset(DEFAULT_FORBIDDEN_ATTRIBUTES),
    allow_data_attributes=False,
    allowed_url_schemes=DEFAULT_URL_SCHEMES,
)

# bleach's protocol list and no inline data: media
STRICT_POLICY = replace(
    DEFAULT_POLICY, allowed_url_schemes=STRICT_URL_SCHEMES, data_uri_tags=frozenset()
)


@lru_cache(maxsize=1)
def get_configured_policy() -> Policy:
    """Build (or retrieve cached) policy from environment settings."""

    changes = {}
    if not settings.SANITIZER_URL_SCHEME_CHECK:
        changes["allowed_url_schemes"] = None

    policy = DEFAULT_POLICY.extend(
        allowed_tags=settings.SANITIZER_EXTRA_ALLOWED_TAGS,
        forbidden_tags=settings.SANITIZER_EXTRA_FORBIDDEN_TAGS,
        allow_data_attributes=settings.SANITIZER_ALLOW_DATA_ATTRIBUTES,
        max_depth=settings.SANITIZER_MAX_DEPTH,
        **changes,
    )

    if policy.allowed_url_schemes is None:
        logger.warning(
            "url_scheme_check_disabled",
            url_attributes=sorted(policy.url_attributes),
            hint="javascript: and data: URLs pass through unchecked",
        )

    logger.info(
        "sanitizer_policy_configured",
        allowed_tags=len(policy.allowed_tags),
        forbidden_tags=sorted(policy.forbidden_tags),
        allow_data_attributes=policy.allow_data_attributes,
        max_depth=policy.max_depth,
        url_scheme_check=policy.allowed_url_schemes is not None,
    )
    return policy
