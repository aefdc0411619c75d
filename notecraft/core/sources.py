"""Operations over a draft's ordered source list.

Lists are never mutated in place: every operation returns a new list so that
callers comparing by identity can detect a change.
"""

from __future__ import annotations

import logging
import uuid
from typing import List, Optional, Sequence
from urllib.parse import urlsplit

from .models import LinkSource, PdfSource, Source, TextSource

logger = logging.getLogger(__name__)

TEXT_TITLE_LENGTH = 50


def new_source_id() -> str:
    """Short opaque identifier for a newly created source."""
    return uuid.uuid4().hex[:8]


def add_source(sources: Sequence[Source], source: Source) -> List[Source]:
    """Append ``source``; uniqueness of ``source.id`` is left to the caller."""
    if any(s.id == source.id for s in sources):
        logger.warning("Source id already present in draft", extra={"source_id": source.id})
    return [*sources, source]


def remove_source(sources: Sequence[Source], source_id: str) -> List[Source]:
    """Drop every source with ``source_id``; unknown ids are ignored."""
    return [s for s in sources if s.id != source_id]


def extract_domain(url: str) -> str:
    try:
        host = urlsplit(url).hostname
    except ValueError:
        return url
    if not host:
        return url
    return host.removeprefix("www.")


def link_source(url: str, title: Optional[str] = None, source_id: Optional[str] = None) -> LinkSource:
    url = url.strip()
    if not url.startswith("http"):
        url = f"https://{url}"
    return LinkSource(
        id=source_id or new_source_id(),
        title=title or extract_domain(url),
        url=url,
    )


def text_source(text: str, title: Optional[str] = None, source_id: Optional[str] = None) -> TextSource:
    if not title:
        title = text[:TEXT_TITLE_LENGTH]
        if len(text) > TEXT_TITLE_LENGTH:
            title += "..."
    return TextSource(id=source_id or new_source_id(), title=title, content=text)


def pdf_source(filename: str, content: str, source_id: Optional[str] = None) -> PdfSource:
    return PdfSource(id=source_id or new_source_id(), title=filename, content=content)


def source_from_clipboard(text: str) -> Source:
    """Turn pasted or dropped text into a link or text source."""
    if text.startswith("http"):
        return link_source(text)
    return text_source(text)


__all__ = [
    "new_source_id",
    "add_source",
    "remove_source",
    "extract_domain",
    "link_source",
    "text_source",
    "pdf_source",
    "source_from_clipboard",
]
