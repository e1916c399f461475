"""Find a URL inside pasted text (surrounding words, quotes, brackets)."""

from __future__ import annotations

import re

from cleanurls.cleaner import is_valid_url

URL_IN_TEXT_RE = re.compile(r"https?://[^\s<>\"{}|\\^`\[\]]+", re.IGNORECASE)


def extract_url(text: str | None) -> str | None:
    """Return the whole text if it is a single URL, else the first valid URL found in it."""
    if not text:
        return None

    trimmed = text.strip()
    if not any(ch.isspace() for ch in trimmed) and is_valid_url(trimmed):
        return trimmed

    m = URL_IN_TEXT_RE.search(trimmed)
    if m and is_valid_url(m.group(0)):
        return m.group(0)
    return None
