"""Converters from Notion block trees to Markdown, HTML and plain text.

:func:`render` is the single entry point used by the client::

    from notionpost.converter import RenderTarget, render

    html = render(blocks, RenderTarget.HTML)
"""

from __future__ import annotations

from notionpost.models import Block

from .html import HtmlRenderer
from .markdown import MarkdownRenderer
from .plain import render_plain_text
from .rich_text import RenderTarget, render_spans


def render(blocks: list[Block], target: RenderTarget | str = RenderTarget.MARKDOWN) -> str:
    """Render a block tree for *target*.  Output is deterministic."""
    if RenderTarget(target) is RenderTarget.HTML:
        return HtmlRenderer().render_blocks(blocks)
    return MarkdownRenderer().render_blocks(blocks)


__all__ = [
    "HtmlRenderer",
    "MarkdownRenderer",
    "RenderTarget",
    "render",
    "render_plain_text",
    "render_spans",
]
