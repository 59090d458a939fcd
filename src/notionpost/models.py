"""Data models for notionpost.

* :class:`Annotations` / :class:`RichTextSpan` -- inline text with formatting.
* :class:`Block` -- one node of a page's content tree, owning its children.
* :class:`Post` -- the presentation-ready output entity.

Raw API payloads stay plain dicts until they cross into these types via
the ``from_api`` constructors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


# ---------------------------------------------------------------------------
# Rich text
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Annotations:
    """Inline formatting flags of a :class:`RichTextSpan`."""

    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False
    color: str = "default"

    @classmethod
    def from_api(cls, data: dict[str, Any] | None) -> Annotations:
        data = data or {}
        return cls(
            bold=bool(data.get("bold", False)),
            italic=bool(data.get("italic", False)),
            strikethrough=bool(data.get("strikethrough", False)),
            underline=bool(data.get("underline", False)),
            code=bool(data.get("code", False)),
            color=data.get("color") or "default",
        )


@dataclass(frozen=True)
class RichTextSpan:
    """An inline run of text with its annotations and optional link."""

    text: str
    annotations: Annotations = field(default_factory=Annotations)
    href: str | None = None

    @classmethod
    def from_api(cls, segment: dict[str, Any]) -> RichTextSpan:
        """Build a span from a Notion rich_text object.

        API responses carry ``plain_text``; locally built segments only
        have ``text.content`` (and ``text.link.url``).  Equation segments
        contribute their expression as text.
        """
        text = segment.get("plain_text")
        if not text:
            if segment.get("type") == "equation":
                text = (segment.get("equation") or {}).get("expression", "")
            else:
                text = (segment.get("text") or {}).get("content", "")
        href = segment.get("href")
        if not href:
            link = (segment.get("text") or {}).get("link") or {}
            href = link.get("url")
        return cls(
            text=text or "",
            annotations=Annotations.from_api(segment.get("annotations")),
            href=href or None,
        )


def spans_from_api(segments: list[dict[str, Any]] | None) -> list[RichTextSpan]:
    """Convert a rich_text array to spans, tolerating ``None``."""
    return [RichTextSpan.from_api(seg) for seg in segments or [] if isinstance(seg, dict)]


def media_url(data: dict[str, Any] | None) -> str:
    """URL of an ``external`` or Notion-hosted ``file`` object (image, icon, cover)."""
    data = data or {}
    kind = data.get("type", "")
    if kind in ("external", "file"):
        return (data.get(kind) or {}).get("url") or ""
    return ""


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------

@dataclass
class Block:
    """One node of a page's content tree.

    ``data`` is the type-specific payload (``block[block["type"]]`` in
    the API shape).  ``children`` is filled by the tree fetcher; a block
    may keep ``has_children=True`` with no children attached when it sits
    at the depth bound.
    """

    id: str
    type: str
    data: dict[str, Any] = field(default_factory=dict)
    has_children: bool = False
    children: list[Block] = field(default_factory=list)
    depth: int = 1

    @classmethod
    def from_api(cls, raw: dict[str, Any], depth: int = 1) -> Block:
        block_type = raw.get("type") or "unsupported"
        data = raw.get(block_type)
        return cls(
            id=raw.get("id", ""),
            type=block_type,
            data=data if isinstance(data, dict) else {},
            has_children=bool(raw.get("has_children", False)),
            depth=depth,
        )

    @property
    def rich_text(self) -> list[RichTextSpan]:
        """Spans of the block's main text (``rich_text`` in its payload)."""
        return spans_from_api(self.data.get("rich_text"))

    @property
    def caption(self) -> list[RichTextSpan]:
        return spans_from_api(self.data.get("caption"))


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------

@dataclass
class Post:
    """A published database row, ready for presentation.

    ``markdown`` and ``content_html`` stay ``None`` until the body has
    been fetched (single-post requests, or list backfill).
    """

    id: str
    title: str
    subtitle: str = ""
    slug: str = ""
    content: str = ""
    tags: list[str] = field(default_factory=list)
    cover_url: str | None = None
    url: str | None = None
    created_at: str | None = None
    last_edited: str | None = None
    markdown: str | None = None
    content_html: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON shape served to clients; ``None`` keys are omitted."""
        out: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "subtitle": self.subtitle,
            "slug": self.slug,
            "content": self.content,
            "tags": list(self.tags),
        }
        optional = {
            "coverUrl": self.cover_url,
            "url": self.url,
            "createdAt": self.created_at,
            "lastEdited": self.last_edited,
            "markdown": self.markdown,
            "contentHtml": self.content_html,
        }
        out.update({k: v for k, v in optional.items() if v is not None})
        return out
