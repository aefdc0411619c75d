"""Core library exposing domain models, settings, exceptions and metrics."""

from .settings import Settings, get_settings
from .exceptions import DomainError, NotFoundError, ValidationError, StorageError, Error
from .models import (
    ChatMessage,
    Draft,
    DraftFull,
    DraftMeta,
    DraftMetrics,
    Insights,
    LinkSource,
    PdfSource,
    Source,
    TextSource,
)
from .metrics import count_words, excerpt, strip_to_plain_text
from .draft import derive_meta, enrich, now_ms

__all__ = [
    "Settings",
    "get_settings",
    "DomainError",
    "NotFoundError",
    "ValidationError",
    "StorageError",
    "Error",
    "ChatMessage",
    "Draft",
    "DraftFull",
    "DraftMeta",
    "DraftMetrics",
    "Insights",
    "LinkSource",
    "PdfSource",
    "Source",
    "TextSource",
    "count_words",
    "excerpt",
    "strip_to_plain_text",
    "derive_meta",
    "enrich",
    "now_ms",
]
