"""Block tree to HTML renderer.

Usage::

    from notionpost.converter.html import HtmlRenderer

    html = HtmlRenderer().render_blocks(blocks)

Consecutive list items of the same kind share one ``<ul>``/``<ol>``; a
change of list kind or any non-list block closes the open list first.
Container blocks (list items, quotes, callouts, toggles, to-dos) render
their children inside themselves; other blocks emit their children right
after their own element.  All text is escaped and link targets are
sanitised, so the output can be injected into a page as is.
"""

from __future__ import annotations

from collections.abc import Callable as _Callable

from mistune.util import escape as escape_html

from notionpost.models import Block, media_url

from .rich_text import RenderTarget, render_spans, safe_href, spans_plain_text

_LIST_TAGS: dict[str, str] = {
    "bulleted_list_item": "ul",
    "numbered_list_item": "ol",
}

_HEADING_TAGS: dict[str, str] = {
    "heading_1": "h1",
    "heading_2": "h2",
    "heading_3": "h3",
}


def _text(block: Block) -> str:
    return render_spans(block.rich_text, RenderTarget.HTML)


def code_language(language: str) -> str:
    """CSS-friendly language tag for ``class="language-X"``."""
    if not language or language == "plain text":
        return "plaintext"
    return language.replace(" ", "-").lower()


class HtmlRenderer:
    """Render :class:`~notionpost.models.Block` trees as HTML fragments."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render_blocks(self, blocks: list[Block]) -> str:
        """Render sibling *blocks*, grouping list runs, joined by newlines."""
        parts: list[str] = []
        open_tag: str | None = None
        items: list[str] = []

        def close_list() -> None:
            nonlocal open_tag, items
            if open_tag is not None and items:
                parts.append(f"<{open_tag}>\n" + "\n".join(items) + f"\n</{open_tag}>")
            open_tag = None
            items = []

        for block in blocks:
            list_tag = _LIST_TAGS.get(block.type)
            if list_tag is None:
                close_list()
                html = self.render_block(block)
                if html:
                    parts.append(html)
                continue

            if list_tag != open_tag:
                close_list()
                open_tag = list_tag
            item = self._render_list_item(block)
            if item:
                items.append(item)

        close_list()
        return "\n".join(parts)

    def render_block(self, block: Block) -> str:
        """Render one block and its children.

        A lone list item is wrapped in its own list element.
        """
        if block.type in _LIST_TAGS:
            return self.render_blocks([block])
        renderer = _BLOCK_RENDERERS.get(block.type, HtmlRenderer._render_fallback)
        return renderer(self, block)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _children(self, block: Block) -> str:
        return self.render_blocks(block.children) if block.children else ""

    def _after(self, own: str, block: Block) -> str:
        """*own* followed by the block's children, skipping empty parts."""
        return "\n".join(p for p in (own, self._children(block)) if p)

    def _render_list_item(self, block: Block) -> str:
        text = _text(block)
        children = self._children(block)
        if not text and not children:
            return ""
        inner = f"{text}\n{children}" if children else text
        return f"<li>{inner}</li>"

    # ------------------------------------------------------------------
    # Block type renderers
    # ------------------------------------------------------------------

    def _render_paragraph(self, block: Block) -> str:
        text = _text(block)
        return self._after(f"<p>{text}</p>" if text else "", block)

    def _render_heading(self, block: Block) -> str:
        tag = _HEADING_TAGS[block.type]
        text = _text(block)
        return self._after(f"<{tag}>{text}</{tag}>" if text else "", block)

    def _render_quote(self, block: Block) -> str:
        inner = "\n".join(p for p in (_text(block), self._children(block)) if p)
        return f"<blockquote>{inner}</blockquote>" if inner else ""

    def _render_callout(self, block: Block) -> str:
        text = _text(block)
        children = self._children(block)
        if not text and not children:
            return ""
        icon = block.data.get("icon") or {}
        icon_html = ""
        if icon.get("type") == "emoji" and icon.get("emoji"):
            icon_html = f'<span class="callout-icon">{escape_html(icon["emoji"])}</span>'
        elif media_url(icon):
            icon_html = f'<img class="callout-icon" src="{safe_href(media_url(icon))}" alt="">'
        body = f'<div class="callout-text">{text}</div>' if text else ""
        inner = "".join((icon_html, body, children))
        return f'<div class="callout">{inner}</div>'

    def _render_code(self, block: Block) -> str:
        code = spans_plain_text(block.rich_text)
        if not code:
            return ""
        language = code_language(block.data.get("language") or "")
        return (
            f'<pre><code class="language-{escape_html(language)}">'
            f"{escape_html(code)}</code></pre>"
        )

    def _render_image(self, block: Block) -> str:
        url = media_url(block.data)
        if not url:
            return ""
        caption_text = spans_plain_text(block.caption).strip()
        alt = escape_html(caption_text or "Image")
        img = f'<img src="{safe_href(url)}" alt="{alt}" loading="lazy">'
        caption = render_spans(block.caption, RenderTarget.HTML)
        figcaption = f"<figcaption>{caption}</figcaption>" if caption_text else ""
        return f"<figure>{img}{figcaption}</figure>"

    def _render_divider(self, block: Block) -> str:
        return "<hr>"

    def _render_to_do(self, block: Block) -> str:
        text = _text(block)
        children = self._children(block)
        if not text and not children:
            return ""
        checked = " checked" if block.data.get("checked") else ""
        label = f'<label><input type="checkbox" disabled{checked}> {text}</label>'
        return f'<div class="to-do">{label}{children}</div>'

    def _render_toggle(self, block: Block) -> str:
        text = _text(block)
        children = self._children(block)
        if not text and not children:
            return ""
        return f"<details><summary>{text}</summary>{children}</details>"

    def _render_fallback(self, block: Block) -> str:
        inner = "\n".join(p for p in (_text(block), self._children(block)) if p)
        if not inner:
            return ""
        css = escape_html(block.type)
        return f'<div class="notion-block notion-{css}">{inner}</div>'


# ------------------------------------------------------------------
# Block renderer dispatch table
# ------------------------------------------------------------------

_BlockRenderer = _Callable[["HtmlRenderer", Block], str]

_BLOCK_RENDERERS: dict[str, _BlockRenderer] = {
    "paragraph": HtmlRenderer._render_paragraph,
    "heading_1": HtmlRenderer._render_heading,
    "heading_2": HtmlRenderer._render_heading,
    "heading_3": HtmlRenderer._render_heading,
    "quote": HtmlRenderer._render_quote,
    "callout": HtmlRenderer._render_callout,
    "code": HtmlRenderer._render_code,
    "image": HtmlRenderer._render_image,
    "divider": HtmlRenderer._render_divider,
    "to_do": HtmlRenderer._render_to_do,
    "toggle": HtmlRenderer._render_toggle,
}
