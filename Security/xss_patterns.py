"""
XSS PATTERN LIBRARY
===================
Ordered removal rules for script injection constructs in free text.
"""

# FLOW:
# - XSS_RULES are applied in order by xss_protection.sanitize().
# - neutralize_residual_triggers() runs after removal, before encoding.
# WHY:
# - Names, addresses and notes must never carry live script vectors.
# HOW:
# - Case-insensitive regexes compiled once at import, read-only afterwards.
# - Every unbounded run stops at an angle bracket, a quote or the next
#   opening construct, so matching stays linear on hostile input.

from __future__ import annotations

import re
from typing import NamedTuple


class XssRule(NamedTuple):
    name: str
    pattern: re.Pattern[str]
    replacement: str = ""


XSS_RULES: tuple[XssRule, ...] = (
    # Script tags
    XssRule(
        "script-block",
        re.compile(r"<script[^<>]*>(?:[^<]|<(?!/?script))*</script\s*>", re.IGNORECASE),
    ),
    XssRule("script-close", re.compile(r"</script[^<>]*>?", re.IGNORECASE)),
    XssRule("script-open", re.compile(r"<script[^<>]*>?", re.IGNORECASE)),
    # Inline event handlers, any quote style
    XssRule(
        "event-handler",
        re.compile(
            r"(?<![a-z])on[a-z]+\s*=\s*(?:\"[^\"<>]*\"?|'[^'<>]*'?|[^\s<>\"']*)",
            re.IGNORECASE,
        ),
    ),
    # Dangerous URL schemes
    XssRule("javascript-scheme", re.compile(r"javascript\s*:", re.IGNORECASE)),
    XssRule("vbscript-scheme", re.compile(r"vbscript\s*:", re.IGNORECASE)),
    # Dangerous calls
    XssRule("eval-call", re.compile(r"eval\s*\((?:[^()]*\))?", re.IGNORECASE)),
    XssRule("expression-call", re.compile(r"expression\s*\((?:[^()]*\))?", re.IGNORECASE)),
    # Embedding tags (closing tags are left to the encoding pass)
    XssRule("embed-tag", re.compile(r"<(?:iframe|object|embed)[^<>]*>?", re.IGNORECASE)),
)

RULE_NAMES: tuple[str, ...] = tuple(rule.name for rule in XSS_RULES)

# Trigger forms that must not survive removal: a word holding "on<letter>"
# right before "=", a script scheme colon, or an eval/expression paren.
RESIDUAL_TRIGGERS = re.compile(
    r"(?<![a-z])(?P<word>[a-z]+)(?P<gap>\s*)="
    r"|(?P<scheme>(?:java|vb)script\s*):"
    r"|(?P<call>(?:eval|expression)\s*)\(",
    re.IGNORECASE,
)

_HANDLER_NAME = re.compile(r"on[a-z]", re.IGNORECASE)

# None of these entities contains "=", ":" or "(".
_EQUALS_ENTITY = "&#x3D;"
_COLON_ENTITY = "&#x3A;"
_PAREN_ENTITY = "&#x28;"


def _neutralize(match: re.Match[str]) -> str:
    word = match.group("word")
    if word is not None:
        if _HANDLER_NAME.search(word):
            return word + match.group("gap") + _EQUALS_ENTITY
        return match.group(0)
    scheme = match.group("scheme")
    if scheme is not None:
        return scheme + _COLON_ENTITY
    return match.group("call") + _PAREN_ENTITY


def neutralize_residual_triggers(text: str) -> str:
    """Entity-encode the trigger character of any handler, scheme or call left in text."""
    return RESIDUAL_TRIGGERS.sub(_neutralize, text)


def find_threats(text: str | None) -> list[str]:
    """Names of the rules matching text, in rule order."""
    if not text:
        return []
    return [rule.name for rule in XSS_RULES if rule.pattern.search(text)]
