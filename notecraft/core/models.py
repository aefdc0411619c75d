"""Pydantic models representing core domain entities."""

from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SourceType = Literal["link", "text", "pdf"]
Role = Literal["user", "assistant"]


class _Model(BaseModel):
    """Base model persisted with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _SourceBase(_Model):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Opaque identifier, stable for the source lifetime")
    title: str = ""


class LinkSource(_SourceBase):
    """Web page referenced by URL."""

    type: Literal["link"] = "link"
    url: str


class TextSource(_SourceBase):
    """Text pasted or dropped by the user."""

    type: Literal["text"] = "text"
    content: str = ""


class PdfSource(_SourceBase):
    """Text extracted from an uploaded PDF."""

    type: Literal["pdf"] = "pdf"
    content: str = ""


Source = Annotated[Union[LinkSource, TextSource, PdfSource], Field(discriminator="type")]


class Draft(_Model):
    """The single active draft: title, HTML content and attached sources."""

    title: str = ""
    content: str = ""
    sources: List[Source] = Field(default_factory=list)


class DraftMetrics(_Model):
    """Fields derived from draft content; never set by callers."""

    word_count: int = 0
    source_count: int = 0
    excerpt: str = ""


class DraftMeta(DraftMetrics):
    """Summary of a draft shown in the listing view."""

    id: str
    title: str = ""
    updated_at: int = Field(0, description="Last save, ms since epoch")


class DraftFull(DraftMeta):
    """Draft record stored in the multi-draft collection."""

    content: str = ""
    sources: List[Source] = Field(default_factory=list)

    @classmethod
    def blank(cls, draft_id: str, now: int) -> "DraftFull":
        return cls(id=draft_id, updated_at=now)

    def summary(self) -> DraftMeta:
        return DraftMeta(
            id=self.id,
            title=self.title,
            updated_at=self.updated_at,
            word_count=self.word_count,
            source_count=self.source_count,
            excerpt=self.excerpt,
        )


class ChatMessage(_Model):
    """Single message in the assistant conversation."""

    id: str
    role: Role
    content: str


class Quote(_Model):
    text: str
    source: str


class Summary(_Model):
    text: str
    tags: List[str] = Field(default_factory=list)


class Theme(_Model):
    name: str
    description: str


class GeneratedImage(_Model):
    """Outcome of an image request: a URL, or text explaining why there is none."""

    image_url: Optional[str] = None
    fallback_text: Optional[str] = None


class Insights(_Model):
    """Quotes, summaries and themes derived from a draft's sources."""

    quotes: List[Quote] = Field(default_factory=list)
    summaries: List[Summary] = Field(default_factory=list)
    themes: List[Theme] = Field(default_factory=list)


__all__ = [
    "SourceType",
    "Role",
    "LinkSource",
    "TextSource",
    "PdfSource",
    "Source",
    "Draft",
    "DraftMetrics",
    "DraftMeta",
    "DraftFull",
    "ChatMessage",
    "Quote",
    "Summary",
    "Theme",
    "Insights",
    "GeneratedImage",
]
