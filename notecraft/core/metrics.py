"""Plain-text metrics derived from editor HTML."""

from __future__ import annotations

import html as _html
import re

EXCERPT_LENGTH = 80
ELLIPSIS = "…"

_TAG_RE = re.compile(r"<[^>]*>")
_WS_RE = re.compile(r"\s+")


def strip_to_plain_text(html: str) -> str:
    """Drop markup and normalise whitespace.

    Tags are replaced by a space so that ``<p>a</p><p>b</p>`` yields two words.
    A ``<`` without a closing ``>`` is not a tag and stays in the text.
    """
    if not html:
        return ""
    text = _TAG_RE.sub(" ", html)
    text = _html.unescape(text).replace("\xa0", " ")
    return _WS_RE.sub(" ", text).strip()


def count_words(html: str) -> int:
    text = strip_to_plain_text(html)
    if not text:
        return 0
    return len([token for token in text.split() if token])


def excerpt(html: str, max_len: int = EXCERPT_LENGTH) -> str:
    """Return the first ``max_len`` characters of plain text, ellipsized."""
    text = strip_to_plain_text(html)
    if len(text) > max_len:
        return text[:max_len] + ELLIPSIS
    return text


__all__ = ["EXCERPT_LENGTH", "ELLIPSIS", "strip_to_plain_text", "count_words", "excerpt"]
