"""
INPUT VALIDATION
================
Validation helpers that run before sanitization on write paths.
"""

# FLOW:
# - strip_control_chars() drops non-printing control characters.
# - validate_allowlist() enforces regex allowlists (state, zip code).
# WHY:
# - Rejection belongs here; the sanitizers never reject input.
# HOW:
# - Normalizes input and applies strict allowlists.

from __future__ import annotations

import re


_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

STATE_CODE_PATTERN = r"[A-Za-z]{2}"
ZIP_CODE_PATTERN = r"\d{5}(?:-\d{4})?"


def strip_control_chars(value: str | None) -> str | None:
    """Remove C0 controls except tab, newline and carriage return."""
    if value is None:
        return None
    return _CONTROL_CHARS.sub("", value)


def validate_allowlist(value: str | None, pattern: str) -> str | None:
    """Return value when it fully matches pattern, else None."""
    if value is None:
        return None
    if not re.fullmatch(pattern, value):
        return None
    return value
