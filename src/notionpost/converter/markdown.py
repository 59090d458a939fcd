"""Block tree to Markdown renderer.

Usage::

    from notionpost.converter.markdown import MarkdownRenderer

    md = MarkdownRenderer().render_blocks(blocks)

Layout rules:

* Sibling blocks are separated by a blank line, except the children of a
  list item, which are separated by a single newline so the list stays
  tight.
* List-item and toggle children are indented one level (two spaces);
  children of every other block keep the parent's depth.
* A block with no text and no renderable children disappears.
"""

from __future__ import annotations

from collections.abc import Callable as _Callable

from notionpost.models import Block, media_url

from .rich_text import RenderTarget, markdown_escape, markdown_url, render_spans, spans_plain_text

_LIST_TYPES: frozenset[str] = frozenset({"bulleted_list_item", "numbered_list_item"})

# Children of these types are indented one level deeper.
_NESTING_TYPES: frozenset[str] = _LIST_TYPES | {"toggle"}


def _text(block: Block) -> str:
    return render_spans(block.rich_text, RenderTarget.MARKDOWN)


class MarkdownRenderer:
    """Render :class:`~notionpost.models.Block` trees as Markdown."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render_blocks(self, blocks: list[Block], depth: int = 0) -> str:
        """Render sibling *blocks* at *depth* to a Markdown string."""
        return self._render_block_list(blocks, depth, tight=False)

    def render_block(self, block: Block, depth: int = 0) -> str:
        """Render one block and its children."""
        own = self._dispatch(block, depth)

        if not block.children:
            return own.rstrip()

        child_depth = depth + 1 if block.type in _NESTING_TYPES else depth
        child_md = self._render_block_list(
            block.children, child_depth, tight=block.type in _LIST_TYPES,
        )
        if not child_md:
            return own.rstrip()
        if not own:
            return child_md
        separator = "\n" if block.type in _LIST_TYPES else "\n\n"
        return f"{own}{separator}{child_md}".rstrip()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _render_block_list(self, blocks: list[Block], depth: int, tight: bool) -> str:
        parts = [self.render_block(block, depth) for block in blocks]
        return ("\n" if tight else "\n\n").join(p for p in parts if p)

    def _dispatch(self, block: Block, depth: int) -> str:
        renderer = _BLOCK_RENDERERS.get(block.type, MarkdownRenderer._render_fallback)
        return renderer(self, block, depth)

    # ------------------------------------------------------------------
    # Block type renderers
    # ------------------------------------------------------------------

    def _render_paragraph(self, block: Block, depth: int) -> str:
        text = _text(block)
        return f"{'  ' * depth}{text}" if text else ""

    def _render_heading(self, block: Block, level: int) -> str:
        text = _text(block)
        return f"{'#' * level} {text}" if text else ""

    def _render_heading_1(self, block: Block, depth: int) -> str:
        return self._render_heading(block, 1)

    def _render_heading_2(self, block: Block, depth: int) -> str:
        return self._render_heading(block, 2)

    def _render_heading_3(self, block: Block, depth: int) -> str:
        return self._render_heading(block, 3)

    def _render_bulleted_list_item(self, block: Block, depth: int) -> str:
        text = _text(block)
        return f"{'  ' * depth}- {text}" if text else ""

    def _render_numbered_list_item(self, block: Block, depth: int) -> str:
        text = _text(block)
        return f"{'  ' * depth}1. {text}" if text else ""

    def _render_quote(self, block: Block, depth: int) -> str:
        text = _text(block)
        if not text:
            return ""
        indent = "  " * depth
        return "\n".join(f"{indent}> {line}" for line in text.split("\n"))

    def _render_callout(self, block: Block, depth: int) -> str:
        text = _text(block)
        if not text:
            return ""
        icon = block.data.get("icon") or {}
        prefix = ""
        if icon.get("type") == "emoji" and icon.get("emoji"):
            prefix = f"{icon['emoji']} "
        elif media_url(icon):
            prefix = f"![icon]({markdown_url(media_url(icon))}) "
        indent = "  " * depth
        lines = f"{prefix}{text}".split("\n")
        return "\n".join(f"{indent}> {line}" for line in lines)

    def _render_code(self, block: Block, depth: int) -> str:
        code = spans_plain_text(block.rich_text)
        if not code:
            return ""
        language = block.data.get("language") or ""
        if language == "plain text":
            language = ""
        return f"```{language}\n{code}\n```"

    def _render_image(self, block: Block, depth: int) -> str:
        url = media_url(block.data)
        if not url:
            return ""
        caption = spans_plain_text(block.caption).strip()
        alt = markdown_escape(caption or "Image")
        return f"![{alt}]({markdown_url(url)})"

    def _render_divider(self, block: Block, depth: int) -> str:
        return "---"

    def _render_toggle(self, block: Block, depth: int) -> str:
        text = _text(block)
        return f"{'  ' * depth}**{text}**" if text else ""

    def _render_fallback(self, block: Block, depth: int) -> str:
        # to_do and unknown types: best-effort inline text.
        text = _text(block)
        return f"{'  ' * depth}{text}" if text else ""


# ------------------------------------------------------------------
# Block renderer dispatch table
# ------------------------------------------------------------------

_BlockRenderer = _Callable[["MarkdownRenderer", Block, int], str]

_BLOCK_RENDERERS: dict[str, _BlockRenderer] = {
    "paragraph": MarkdownRenderer._render_paragraph,
    "heading_1": MarkdownRenderer._render_heading_1,
    "heading_2": MarkdownRenderer._render_heading_2,
    "heading_3": MarkdownRenderer._render_heading_3,
    "bulleted_list_item": MarkdownRenderer._render_bulleted_list_item,
    "numbered_list_item": MarkdownRenderer._render_numbered_list_item,
    "quote": MarkdownRenderer._render_quote,
    "callout": MarkdownRenderer._render_callout,
    "code": MarkdownRenderer._render_code,
    "image": MarkdownRenderer._render_image,
    "divider": MarkdownRenderer._render_divider,
    "toggle": MarkdownRenderer._render_toggle,
    "to_do": MarkdownRenderer._render_fallback,
}
