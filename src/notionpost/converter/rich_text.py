"""Inline rendering: rich-text spans to Markdown or HTML.

:func:`render_spans` renders each span independently and concatenates
the results, so rendering ``a + b`` always equals rendering ``a`` plus
rendering ``b``.

Annotation order (innermost first):

* Markdown -- code, else bold -> italic -> strikethrough -> underline;
  then link.  Code spans suppress every other emphasis marker.
* HTML -- code -> bold -> italic -> strikethrough -> underline -> colour;
  then link.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import Enum
from typing import Any

from mistune.renderers.html import HTMLRenderer
from mistune.util import escape as escape_html

from notionpost.models import RichTextSpan


class RenderTarget(str, Enum):
    """Output syntax of the renderers."""

    MARKDOWN = "markdown"
    HTML = "html"


# Characters that start or end inline emphasis in Markdown.
_MD_ESCAPE_RE = re.compile(r"([*_`~])")

# Notion's palette, used for ``color`` annotations in HTML output.
NOTION_COLORS: dict[str, str] = {
    "gray": "#787774",
    "brown": "#9f6b53",
    "orange": "#d9730d",
    "yellow": "#cb912f",
    "green": "#448361",
    "blue": "#337ea9",
    "purple": "#9065b0",
    "pink": "#c14c8a",
    "red": "#d44c47",
}
NOTION_BACKGROUNDS: dict[str, str] = {
    "gray": "#f1f1ef",
    "brown": "#f4eeee",
    "orange": "#fbecdd",
    "yellow": "#fbf3db",
    "green": "#edf3ec",
    "blue": "#e7f3f8",
    "purple": "#f6f3f9",
    "pink": "#faf1f5",
    "red": "#fdebec",
}

# Only used for its URL sanitiser; harmful schemes become "#harmful-link".
_URL_SANITIZER = HTMLRenderer(escape=True)


def markdown_escape(text: str) -> str:
    """Backslash-escape Markdown emphasis characters in *text*."""
    return _MD_ESCAPE_RE.sub(r"\\\1", text)


def markdown_url(url: str) -> str:
    """Percent-encode parentheses so *url* survives inside ``(...)``."""
    return url.replace("(", "%28").replace(")", "%29")


def safe_href(url: str) -> str:
    """Attribute-escape *url*, neutralising ``javascript:`` and friends."""
    return _URL_SANITIZER.safe_url(url)


def color_style(color: str) -> str | None:
    """CSS declaration for a Notion colour name, or ``None`` for default."""
    if not color or color == "default":
        return None
    if color.endswith("_background"):
        base = color[: -len("_background")]
        return f"background-color: {NOTION_BACKGROUNDS.get(base, base)}"
    return f"color: {NOTION_COLORS.get(color, color)}"


# ---------------------------------------------------------------------------
# Per-span rendering
# ---------------------------------------------------------------------------

def _span_to_markdown(span: RichTextSpan) -> str:
    if not span.text:
        return ""
    ann = span.annotations

    if ann.code:
        text = f"`{span.text}`"
    else:
        text = markdown_escape(span.text)
        if ann.bold:
            text = f"**{text}**"
        if ann.italic:
            text = f"_{text}_"
        if ann.strikethrough:
            text = f"~~{text}~~"
        if ann.underline:
            text = f"<u>{text}</u>"

    if span.href:
        text = f"[{text}]({markdown_url(span.href)})"
    return text


def _span_to_html(span: RichTextSpan) -> str:
    if not span.text:
        return ""
    ann = span.annotations

    text = escape_html(span.text).replace("\n", "<br>")
    if ann.code:
        text = f"<code>{text}</code>"
    if ann.bold:
        text = f"<strong>{text}</strong>"
    if ann.italic:
        text = f"<em>{text}</em>"
    if ann.strikethrough:
        text = f"<s>{text}</s>"
    if ann.underline:
        text = f"<u>{text}</u>"
    style = color_style(ann.color)
    if style:
        text = f'<span style="{style}">{text}</span>'

    if span.href:
        text = f'<a href="{safe_href(span.href)}" rel="noopener noreferrer">{text}</a>'
    return text


_SPAN_RENDERERS = {
    RenderTarget.MARKDOWN: _span_to_markdown,
    RenderTarget.HTML: _span_to_html,
}


def render_spans(
    spans: Iterable[RichTextSpan | dict[str, Any]] | None,
    target: RenderTarget = RenderTarget.MARKDOWN,
) -> str:
    """Render rich-text *spans* for *target*.

    Parameters
    ----------
    spans:
        :class:`RichTextSpan` objects or raw Notion rich_text dicts.
    target:
        :attr:`RenderTarget.MARKDOWN` or :attr:`RenderTarget.HTML`.

    Returns
    -------
    str
        The concatenated rendering; ``""`` for no spans.
    """
    if not spans:
        return ""
    render = _SPAN_RENDERERS[RenderTarget(target)]
    parts: list[str] = []
    for span in spans:
        if isinstance(span, dict):
            span = RichTextSpan.from_api(span)
        parts.append(render(span))
    return "".join(parts)


def spans_plain_text(spans: Iterable[RichTextSpan] | None) -> str:
    """Unformatted text of *spans*."""
    return "".join(span.text for span in spans or [])
