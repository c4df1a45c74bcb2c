"""
INPUT SANITIZER
===============
Context-specific encoders for embedding user text in HTML or script.
"""

# FLOW:
# - sanitize_html() / sanitize() encode text for an HTML body.
# - sanitize_html_attribute() encodes text for a quoted attribute value.
# - sanitize_javascript() escapes text for a quoted JS string literal.
# WHY:
# - Each output context breaks on different characters.
# HOW:
# - Encoding only, nothing is removed; None passes through.

from __future__ import annotations

import html
import re


_JS_NAMED_ESCAPES = {
    "\\": "\\\\",
    "'": "\\x27",
    '"': "\\x22",
    "/": "\\/",
    "&": "\\x26",
    "<": "\\x3c",
    ">": "\\x3e",
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}

_JS_UNSAFE = re.compile("[\\\\'\"/&<>\\x00-\\x1f\\x7f\\u2028\\u2029]")


def _js_replacement(match: re.Match[str]) -> str:
    char = match.group(0)
    escaped = _JS_NAMED_ESCAPES.get(char)
    if escaped is not None:
        return escaped
    return "\\x%02x" % ord(char)


def sanitize_javascript(value: str | None) -> str | None:
    """
    Escape text for use inside a single- or double-quoted JS string literal.

    Example: It's "x" -> It\\x27s \\x22x\\x22
    """
    if value is None:
        return None
    return _JS_UNSAFE.sub(_js_replacement, value)


def sanitize_html(value: str | None) -> str | None:
    """
    Encode HTML special characters so markup renders as text.

    Example: <script>alert('xss')</script>
          -> &lt;script&gt;alert(&#x27;xss&#x27;)&lt;/script&gt;
    """
    if value is None:
        return None
    return html.escape(value, quote=True)


def sanitize_html_attribute(value: str | None) -> str | None:
    if value is None:
        return None
    return html.escape(value, quote=True).replace("`", "&#x60;")


def sanitize(value: str | None) -> str | None:
    """General-purpose encoding for text rendered in an HTML body."""
    return sanitize_html(value)
