"""
SANITIZATION AUDIT
==================
Structured log lines for inputs the sanitizers had to change.

FLOW:
- record_sanitization() is called by write paths after a sanitizer ran.

WHY:
- Lets incident response see which fields attract injection attempts.

HOW:
- Writes key=value lines to logs/sanitizer.log; raw text is never logged,
  only its length and a short SHA-256 fingerprint.
"""

from __future__ import annotations

import hashlib
import logging
import os
from logging.handlers import RotatingFileHandler

from Security.metrics import increment_sanitizer_event, increment_threats
from Security.sanitizer_config import SANITIZER_SETTINGS, feature_enabled
from Security.xss_patterns import find_threats


def _get_logger() -> logging.Logger:
    logger = logging.getLogger("security.sanitizer")
    if logger.handlers:
        return logger

    log_file = SANITIZER_SETTINGS["SANITIZER_LOG_FILE"]
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=2_000_000, backupCount=3)
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(message)s")
    handler.setFormatter(formatter)

    logger.setLevel(logging.INFO)
    logger.addHandler(handler)
    return logger


def fingerprint(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:12]


def record_sanitization(sanitizer: str, field: str, raw: str | None, clean: str | None) -> list[str]:
    """Report one sanitizer call; returns the rule names the raw input matched."""
    modified = raw != clean
    increment_sanitizer_event(sanitizer, modified)
    if not modified or raw is None:
        return []

    threats = find_threats(raw)
    increment_threats(threats)
    if feature_enabled("sanitization-audit", True):
        _get_logger().info(
            "sanitizer=%s field=%s threats=%s length_in=%s length_out=%s fingerprint=%s",
            sanitizer,
            field,
            ",".join(threats) or "-",
            len(raw),
            len(clean or ""),
            fingerprint(raw),
        )
    return threats
