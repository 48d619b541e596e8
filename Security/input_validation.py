"""
INPUT VALIDATION & SANITIZATION
===============================
Bounded sanitization for values read from request bodies.
"""

# FLOW:
# - sanitize_input_value() strips tags/control characters and truncates.
# - bound_secret_value() only truncates; secrets are never rewritten.
# WHY:
# - Blocks markup injection and oversized values before they reach the directory.
# HOW:
# - Truncates first, then removes tags and control characters.

from __future__ import annotations

import re

DEFAULT_MAX_LENGTH = 1024

_TAG_RE = re.compile(r"<[^>]*>")
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def _as_text(value) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return str(value)


def sanitize_input_value(value, max_len: int = DEFAULT_MAX_LENGTH) -> str | None:
    value = _as_text(value)
    if value is None:
        return None
    value = value.strip()[:max_len]
    value = _TAG_RE.sub("", value)
    value = _CONTROL_RE.sub("", value)
    return value or None


def bound_secret_value(value, max_len: int = DEFAULT_MAX_LENGTH) -> str | None:
    value = _as_text(value)
    if not value:
        return None
    return value[:max_len]
