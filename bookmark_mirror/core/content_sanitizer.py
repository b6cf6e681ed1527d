"""Normalisation of extracted article text before it is stored and indexed.

Extracted markup frequently arrives JSON-escaped, so literal backslash
sequences are unwound before whitespace is collapsed.
"""

from __future__ import annotations

import re

_ESCAPE_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    ('\\"', '"'),
    ("\\'", "'"),
    ("\\n", "  "),
    ("\\t", "  "),
)

_WHITESPACE_RE = re.compile(r"\s+")


def sanitize_content(text: str | None) -> str:
    """Unescape quote/newline/tab sequences, collapse whitespace runs and trim.

    Args:
        text: Raw title or body text; ``None`` is treated as empty.

    Returns:
        Single-line text with no leading/trailing whitespace.
    """
    if not text:
        return ""

    for escaped, replacement in _ESCAPE_REPLACEMENTS:
        text = text.replace(escaped, replacement)

    return _WHITESPACE_RE.sub(" ", text).strip()
