"""Derivation of draft metadata from its authoritative content."""

from __future__ import annotations

import time
from typing import Sequence

from .metrics import EXCERPT_LENGTH, count_words, excerpt
from .models import DraftFull, DraftMetrics, Source


def now_ms() -> int:
    return int(time.time() * 1000)


def derive_meta(
    content: str, sources: Sequence[Source], excerpt_length: int = EXCERPT_LENGTH
) -> DraftMetrics:
    """Compute word count, source count and excerpt for a draft."""
    return DraftMetrics(
        word_count=count_words(content),
        source_count=len(sources),
        excerpt=excerpt(content, excerpt_length),
    )


def enrich(draft: DraftFull, now: int, excerpt_length: int = EXCERPT_LENGTH) -> DraftFull:
    """Return a copy of ``draft`` stamped with ``now`` and fresh metadata.

    Whatever derived values the caller passed in are discarded.
    """
    meta = derive_meta(draft.content, draft.sources, excerpt_length)
    return draft.model_copy(
        update={
            "updated_at": now,
            "word_count": meta.word_count,
            "source_count": meta.source_count,
            "excerpt": meta.excerpt,
            "sources": list(draft.sources),
        }
    )


__all__ = ["now_ms", "derive_meta", "enrich"]
