"""
MARKUP SANITIZER
================
Allow-list HTML sanitization for text rendered as limited rich markup.
"""

# FLOW:
# - sanitize_html() keeps a small set of formatting tags and link attributes.
# - sanitize_text() strips every tag and keeps only text.
# WHY:
# - Render-time pass, independent from the pre-persistence pattern filter.
# HOW:
# - bleach parses with html5lib and re-serializes only allow-listed nodes.
# - bleach.clean() builds a fresh Cleaner per call; Cleaner instances hold
#   parser state and are not shared between threads.

from __future__ import annotations

import bleach

from Security.sanitizer_config import SANITIZER_SETTINGS


ALLOWED_TAGS: frozenset[str] = frozenset(
    ["b", "i", "em", "strong", "p", "br", "ul", "ol", "li", "a"]
)

# Link attributes only; no data-* or event attributes anywhere.
ALLOWED_ATTRIBUTES: dict[str, list[str]] = {
    "a": ["href", "target", "rel"],
}

ALLOWED_PROTOCOLS: frozenset[str] = frozenset(SANITIZER_SETTINGS["MARKUP_ALLOWED_PROTOCOLS"])


def sanitize_html(dirty: str | None) -> str | None:
    """
    Sanitize untrusted HTML for rendering as limited rich text.

    Tags outside the allow-list are removed and their text is kept.
    """
    if not dirty:
        return dirty
    return bleach.clean(
        dirty,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
        strip_comments=True,
    )


def sanitize_text(dirty: str | None) -> str | None:
    """Strip all HTML, returning text that is safe to insert as markup."""
    if not dirty:
        return dirty
    return bleach.clean(dirty, tags=frozenset(), attributes={}, strip=True, strip_comments=True)
