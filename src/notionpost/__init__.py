"""notionpost: Notion database rows rendered as blog posts.

Public re-exports
-----------------

* **Client:** :class:`PostClient`
* **Configuration:** :class:`NotionPostConfig`
* **Errors:** every :class:`NotionPostError` subclass and :class:`ErrorCode`
* **Models:** :class:`Post`, :class:`Block`, :class:`RichTextSpan`
* **Rendering:** :func:`render`, :func:`render_spans`, :class:`RenderTarget`

Usage::

    from notionpost import NotionPostConfig, PostClient

    async with PostClient(NotionPostConfig.from_env()) as client:
        post = await client.get_post("hello-world")
        print(post.content_html)
"""

from __future__ import annotations

from notionpost.boundary import BoundaryResponse, handle_get_post, handle_list_posts

# ── Client ──────────────────────────────────────────────────────────────
from notionpost.client import PostClient

# ── Configuration ───────────────────────────────────────────────────────
from notionpost.config import DEFAULT_PUBLISHED_KEYWORDS, NotionPostConfig

# ── Rendering ───────────────────────────────────────────────────────────
from notionpost.converter import RenderTarget, render, render_plain_text, render_spans

# ── Errors ──────────────────────────────────────────────────────────────
from notionpost.errors import (
    ConfigurationError,
    ErrorCode,
    MalformedPayloadError,
    NotFoundError,
    NotionPostError,
    PartialEnrichmentFailure,
    UpstreamError,
    boundary_status,
)

# ── Models ──────────────────────────────────────────────────────────────
from notionpost.models import Annotations, Block, Post, RichTextSpan
from notionpost.properties import PropertyType, resolve_property

__all__ = [
    # Client & boundary
    "PostClient",
    "BoundaryResponse",
    "handle_get_post",
    "handle_list_posts",
    # Configuration
    "NotionPostConfig",
    "DEFAULT_PUBLISHED_KEYWORDS",
    # Rendering
    "RenderTarget",
    "render",
    "render_plain_text",
    "render_spans",
    # Errors
    "NotionPostError",
    "ErrorCode",
    "ConfigurationError",
    "UpstreamError",
    "NotFoundError",
    "MalformedPayloadError",
    "PartialEnrichmentFailure",
    "boundary_status",
    # Models
    "Annotations",
    "Block",
    "Post",
    "RichTextSpan",
    # Properties
    "PropertyType",
    "resolve_property",
]
