"""HTML fragments inserted into a draft from assistant output."""

from __future__ import annotations

import re
from html import escape

from .models import GeneratedImage, Quote, Summary, Theme

_PARAGRAPH = '<p style="margin: 12px 0;">{}</p>'
_BLOCKQUOTE = (
    '<blockquote style="border-left: 3px solid var(--accent-50); padding-left: 12px; '
    'margin: 12px 0; color: var(--neutral-30); font-style: italic;">"{text}"<br>'
    '<small style="color: var(--neutral-50);">— {source}</small></blockquote>'
)

_FIGURE = (
    '<div style="margin: 16px 0; text-align: center;"><img src="{url}" alt="{alt}" '
    'style="max-width: 100%; border-radius: 8px; box-shadow: 0 2px 8px rgba(0,0,0,0.1);" />'
    '<p style="font-size: 12px; color: var(--neutral-50); margin-top: 4px;">Generated: {caption}</p></div>'
)
_IMAGE_FALLBACK = (
    '<div style="margin: 16px 0; padding: 16px; background: var(--neutral-90); '
    'border-radius: 8px; text-align: center;">'
    '<p style="color: var(--neutral-40); font-size: 14px;">\U0001f3a8 {text}</p></div>'
)


def quote_html(quote: Quote) -> str:
    return _BLOCKQUOTE.format(text=quote.text, source=quote.source)


def summary_html(summary: Summary) -> str:
    return _PARAGRAPH.format(summary.text)


def theme_html(theme: Theme) -> str:
    return _PARAGRAPH.format(f"<strong>{theme.name}:</strong> {theme.description}")


def format_message(text: str) -> str:
    """Render the light Markdown used in chat replies as HTML."""
    html = re.sub(r"\*\*(.*?)\*\*", r"<strong>\1</strong>", text)
    html = re.sub(r"\*(.*?)\*", r"<em>\1</em>", html)
    html = re.sub(r"^- (.*?)$", r"<li>\1</li>", html, flags=re.M)
    html = re.sub(r"((?:<li>[\s\S]*?</li>)+)", r"<ul>\1</ul>", html)
    return html.replace("\n", "<br/>")


def chat_html(text: str) -> str:
    return _PARAGRAPH.format(format_message(text))


def image_html(prompt: str, image: GeneratedImage) -> str:
    """Figure for a generated image, or a notice when the model gave none."""
    if image.image_url:
        return _FIGURE.format(
            url=escape(image.image_url), alt=escape(prompt), caption=escape(prompt, quote=False)
        )
    return _IMAGE_FALLBACK.format(text=escape(image.fallback_text or "", quote=False))


__all__ = ["quote_html", "summary_html", "theme_html", "format_message", "chat_html", "image_html"]
