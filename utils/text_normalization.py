"""Text normalization utilities for page-level identity checks."""
from __future__ import annotations

import re
from typing import Iterable

_WHITESPACE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    """
    Collapse runs of whitespace into a single space and strip the ends.

    Case and punctuation are preserved: two pages are only considered
    identical when their visible characters match exactly.

    Examples:
        >>> collapse_whitespace("  Multiple   Spaces\\n here ")
        'Multiple Spaces here'
    """
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()


def joined_text(texts: Iterable[str]) -> str:
    """Trim each text, drop empty ones, and join the rest with single spaces."""
    return " ".join(t for t in (text.strip() for text in texts) if t)
