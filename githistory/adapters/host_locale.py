"""Host locale detection.

Reads the usual POSIX locale variables, then the interpreter's own idea
of the locale, and returns a BCP-47 tag such as ``en-US``.
"""
from __future__ import annotations

import asyncio
import locale as _locale
import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en-US"

_ENV_VARS = ("LC_ALL", "LC_MESSAGES", "LANG", "LANGUAGE")


def normalize_locale(raw: str | None) -> str | None:
    """``en_US.UTF-8`` -> ``en-US``. Returns None for C/POSIX or empty."""
    if not raw:
        return None
    # LANGUAGE may hold a colon-separated preference list
    value = raw.split(":", 1)[0]
    value = value.split(".", 1)[0].split("@", 1)[0].strip()
    if not value or value in {"C", "POSIX"}:
        return None
    return value.replace("_", "-")


def _detect_sync(environ: dict[str, str]) -> str:
    for var in _ENV_VARS:
        tag = normalize_locale(environ.get(var))
        if tag:
            return tag
    try:
        language, _encoding = _locale.getlocale()
    except ValueError:
        language = None
    return normalize_locale(language) or DEFAULT_LOCALE


async def detect_locale() -> str:
    """Locale of the current process environment."""
    tag = await asyncio.to_thread(_detect_sync, dict(os.environ))
    logger.debug("Detected locale %s", tag)
    return tag
