"""Markdown export of editor HTML."""

from __future__ import annotations

import re
from html import unescape

_NBSP = "\xa0"


def _blockquote(match: re.Match) -> str:
    body = re.sub(r"<p[^>]*>(.*?)</p>", r"> \1\n", match.group(1), flags=re.I)
    return body.strip() + "\n\n"


def _unordered(match: re.Match) -> str:
    body = re.sub(r"<li[^>]*>(.*?)</li>", r"- \1\n", match.group(1), flags=re.I)
    return body.strip() + "\n\n"


def _ordered(match: re.Match) -> str:
    counter = 0

    def item(m: re.Match) -> str:
        nonlocal counter
        counter += 1
        return f"{counter}. {m.group(1)}\n"

    body = re.sub(r"<li[^>]*>([\s\S]*?)</li>", item, match.group(1), flags=re.I)
    return body.strip() + "\n\n"


def html_to_markdown(html: str) -> str:
    """Convert editor HTML to Markdown."""
    md = html

    md = re.sub(r"<h1[^>]*>(.*?)</h1>", r"# \1\n\n", md, flags=re.I)
    md = re.sub(r"<h2[^>]*>(.*?)</h2>", r"## \1\n\n", md, flags=re.I)
    md = re.sub(r"<h3[^>]*>(.*?)</h3>", r"### \1\n\n", md, flags=re.I)

    md = re.sub(r"<(strong|b)(?:\s[^>]*)?>(.*?)</(?:strong|b)>", r"**\2**", md, flags=re.I)
    md = re.sub(r"<(em|i)(?:\s[^>]*)?>(.*?)</(?:em|i)>", r"*\2*", md, flags=re.I)

    md = re.sub(r'<a[^>]*href="([^"]*)"[^>]*>(.*?)</a>', r"[\2](\1)", md, flags=re.I)

    md = re.sub(r'<img[^>]*src="([^"]*)"[^>]*alt="([^"]*)"[^>]*/?>', r"![\2](\1)", md, flags=re.I)
    md = re.sub(r'<img[^>]*src="([^"]*)"[^>]*/?>', r"![](\1)", md, flags=re.I)

    md = re.sub(r"<blockquote[^>]*>(.*?)</blockquote>", _blockquote, md, flags=re.I)

    md = re.sub(r"<ul[^>]*>([\s\S]*?)</ul>", _unordered, md, flags=re.I)
    md = re.sub(r"<ol[^>]*>([\s\S]*?)</ol>", _ordered, md, flags=re.I)

    md = re.sub(r"<p[^>]*>(.*?)</p>", r"\1\n\n", md, flags=re.I)
    md = re.sub(r"<br\s*/?>", "\n", md, flags=re.I)
    md = re.sub(r"<div[^>]*>(.*?)</div>", r"\1\n", md, flags=re.I)

    md = re.sub(r"<[^>]+>", "", md)

    md = unescape(md).replace(_NBSP, " ")

    md = re.sub(r"\n{3,}", "\n\n", md)
    return md.strip()


def draft_to_markdown(title: str, content: str) -> str:
    body = html_to_markdown(content)
    if title.strip():
        return f"# {title.strip()}\n\n{body}".rstrip() + "\n"
    return body + "\n" if body else ""


__all__ = ["html_to_markdown", "draft_to_markdown"]
