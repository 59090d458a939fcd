"""Plain-text extraction from block trees.

Used for :attr:`Post.content`: one line per block, in document order,
children after their parent, no markup at all.
"""

from __future__ import annotations

from notionpost.models import Block

from .rich_text import spans_plain_text


def render_plain_text(blocks: list[Block]) -> str:
    """Return the unformatted text of *blocks* and all their descendants."""
    lines: list[str] = []
    stack: list[Block] = list(reversed(blocks))
    while stack:
        block = stack.pop()
        spans = block.caption if block.type == "image" else block.rich_text
        text = spans_plain_text(spans).strip()
        if text:
            lines.append(text)
        stack.extend(reversed(block.children))
    return "\n".join(lines)
