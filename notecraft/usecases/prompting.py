from __future__ import annotations

from typing import Sequence

from notecraft.core.exceptions import ValidationError
from notecraft.core.models import LinkSource, PdfSource, Source, TextSource

NO_SOURCES = "No sources have been added yet."


def describe_source(source: Source, index: int, limit: int, inline: bool) -> str:
    """One prompt line (or block) describing ``source``.

    ``inline`` keeps extracted text on the header line, as the insights prompt
    expects; otherwise it follows on the next line.
    """
    if isinstance(source, LinkSource):
        label = "Link" if inline else "Website"
        return f'Source {index} [{label}]: "{source.title}" - {source.url}'
    if isinstance(source, PdfSource):
        label = "PDF"
    elif isinstance(source, TextSource):
        label = "Text"
    else:
        raise ValidationError(f"Unsupported source type: {type(source).__name__}")
    body = source.content[:limit]
    if inline:
        return f'Source {index} [{label}]: "{source.title}" - {body}'
    return f'Source {index} [{label}]: "{source.title}"\n{body}'


def source_context(sources: Sequence[Source], limit: int, inline: bool = False) -> str:
    if not sources:
        return NO_SOURCES
    separator = "\n" if inline else "\n\n"
    return separator.join(
        describe_source(source, idx, limit, inline) for idx, source in enumerate(sources, start=1)
    )
