"""
FEATURE: XSS SANITIZATION
"""

# FLOW:
# - sanitize_for_context() picks the sanitizer for an output context.
# - clean_field() sanitizes one write-path field and records the outcome.
# WHY:
# - Offers a single import point for output-context sanitization.
# HOW:
# - Dispatch table from OutputContext to the pure sanitizer functions.

from __future__ import annotations

from enum import Enum
from typing import Callable, Optional

from Security import input_sanitizer, markup_sanitizer
from Security.input_sanitizer import sanitize_html_attribute, sanitize_javascript
from Security.sanitization_audit import record_sanitization
from Security.xss_protection import sanitize, sanitize_and_truncate


class OutputContext(str, Enum):
    PLAIN_TEXT = "plain_text"
    MARKUP = "markup"
    STRIPPED_MARKUP = "stripped_markup"
    HTML_BODY = "html_body"
    HTML_ATTRIBUTE = "html_attribute"
    SCRIPT_STRING = "script_string"


_SANITIZERS: dict[OutputContext, Callable[[Optional[str]], Optional[str]]] = {
    OutputContext.PLAIN_TEXT: sanitize,
    OutputContext.MARKUP: markup_sanitizer.sanitize_html,
    OutputContext.STRIPPED_MARKUP: markup_sanitizer.sanitize_text,
    OutputContext.HTML_BODY: input_sanitizer.sanitize_html,
    OutputContext.HTML_ATTRIBUTE: sanitize_html_attribute,
    OutputContext.SCRIPT_STRING: sanitize_javascript,
}


def sanitize_for_context(value: str | None, context: OutputContext | str) -> str | None:
    """Sanitize value for the given output context."""
    return _SANITIZERS[OutputContext(context)](value)


def clean_field(
    field: str,
    value: str | None,
    context: OutputContext = OutputContext.PLAIN_TEXT,
    max_length: int | None = None,
) -> str | None:
    """
    Sanitize a write-path field and record the outcome.

    max_length applies to plain text only: cutting encoder or markup output
    can split an escape sequence or a tag.
    """
    context = OutputContext(context)
    if max_length is not None:
        if context is not OutputContext.PLAIN_TEXT:
            raise ValueError(f"max_length is not supported for {context.value} output")
        cleaned = sanitize_and_truncate(value, max_length)
    else:
        cleaned = sanitize_for_context(value, context)
    record_sanitization(context.value, field, value, cleaned)
    return cleaned


__all__ = [
    "OutputContext",
    "sanitize_for_context",
    "clean_field",
    "sanitize",
    "sanitize_and_truncate",
    "sanitize_javascript",
    "sanitize_html_attribute",
]
