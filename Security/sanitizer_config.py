"""
SANITIZER CONFIG
================
Centralized sanitization settings loaded from environment.
"""

# FLOW:
# - Load the active env file once and expose SANITIZER_SETTINGS.
# - feature_enabled() reads per-concern FEATURE_* switches.
# WHY:
# - Field limits and audit switches differ per environment.
# HOW:
# - Reads env vars through typed helpers and stores them in a dict.

from __future__ import annotations

import logging
import os

import dotenv


DEFAULT_CSP = (
    "default-src 'self'; "
    "script-src 'self'; "
    "style-src 'self'; "
    "img-src 'self' data: https:; "
    "font-src 'self' data:; "
    "connect-src 'self'; "
    "object-src 'none'; "
    "base-uri 'self'; "
    "frame-ancestors 'self'"
)


def get_bool(name: str, default: bool = False) -> bool:
    return os.getenv(name, str(default)).strip().lower() == "true"


def get_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def get_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if not raw:
        return default
    return [item.strip() for item in raw.split(",") if item.strip()]


def _env_name() -> str:
    env = os.getenv("APP_ENV", "").strip().lower()
    if env in {"prod", "production"}:
        return ".env.production"
    return ".env.localhost"


def _env_path() -> str:
    root = os.path.dirname(os.path.dirname(__file__))
    return os.path.join(root, _env_name())


def load_settings() -> dict:
    """Build the settings dict from the current environment."""
    return {
        "SANITIZER_MAX_PASSES": max(1, get_int("SANITIZER_MAX_PASSES", 3)),
        "NOTES_MAX_LENGTH": get_int("NOTES_MAX_LENGTH", 2000),
        "NAME_MAX_LENGTH": get_int("NAME_MAX_LENGTH", 100),
        "ADDRESS_LINE_MAX_LENGTH": get_int("ADDRESS_LINE_MAX_LENGTH", 255),
        "CITY_MAX_LENGTH": get_int("CITY_MAX_LENGTH", 100),
        "ZIP_MAX_LENGTH": get_int("ZIP_MAX_LENGTH", 10),
        "MARKUP_ALLOWED_PROTOCOLS": get_list("MARKUP_ALLOWED_PROTOCOLS", ["http", "https", "mailto"]),
        "CSP_POLICY": os.getenv("CSP_POLICY") or DEFAULT_CSP,
        "SANITIZER_LOG_FILE": os.getenv("SANITIZER_LOG_FILE", os.path.join("logs", "sanitizer.log")),
    }


def feature_enabled(name: str, default: bool = True) -> bool:
    """Return the FEATURE_<NAME> switch, e.g. FEATURE_SANITIZATION_AUDIT."""
    key = "FEATURE_" + name.upper().replace("-", "_")
    return get_bool(key, default)


dotenv.load_dotenv(_env_path())

if get_bool("APP_ENV_LOG"):
    logging.getLogger("security.env").info("Active env file: %s", _env_path())

SANITIZER_SETTINGS = load_settings()
