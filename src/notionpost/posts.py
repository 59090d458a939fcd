"""Assemble :class:`~notionpost.models.Post` objects from database rows.

Rows that are archived, untitled or unpublished never become posts; they
are skipped, not reported as errors.  Slugs come from a ``Slug``
property when the row has one, otherwise from the title; generated slugs
are made unique within one collection by suffixing the first six hex
characters of the row id.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from notionpost.config import NotionPostConfig
from notionpost.models import Post, media_url
from notionpost.properties import (
    TEXT_TYPES,
    PropertyType,
    extract_text,
    is_published,
    resolve_property,
    resolve_tags,
)

_SLUG_STRIP_RE = re.compile(r"[^a-z0-9]+")
_MAX_SLUG_LENGTH = 200


def slugify(text: str) -> str:
    """URL-safe slug of *text*; ``"post"`` when nothing ASCII survives."""
    slug = _SLUG_STRIP_RE.sub("-", text.strip().lower()).strip("-")
    return slug[:_MAX_SLUG_LENGTH] or "post"


def normalize_id(value: str) -> str:
    """Drop separators so dashed and undashed ids compare equal."""
    return re.sub(r"[\s-]", "", value or "").lower()


def is_eligible_record(record: Any) -> bool:
    """Structural checks that come before any property is read."""
    if not isinstance(record, dict):
        return False
    if record.get("object", "page") != "page":
        return False
    return not (record.get("archived") or record.get("in_trash"))


def _text_property(bag: dict[str, Any], names: Iterable[str]) -> str:
    # Only named properties: the type fallback would pick an arbitrary column.
    named = {n: bag[n] for n in names if n in bag}
    resolved = resolve_property(named, (PropertyType.RICH_TEXT,))
    return extract_text(resolved[1]) if resolved else ""


def record_to_post(
    record: dict[str, Any],
    config: NotionPostConfig,
    seen_slugs: set[str],
) -> Post | None:
    """Map one raw row to a metadata-only :class:`Post`.

    Parameters
    ----------
    record:
        A page object from the database query endpoint.
    config:
        Supplies preferred property names and publish keywords.
    seen_slugs:
        Slugs already handed out in this collection; updated in place.

    Returns
    -------
    Post | None
        ``None`` for ineligible rows.
    """
    if not is_eligible_record(record):
        return None

    bag: dict[str, Any] = record.get("properties") or {}

    resolved_title = resolve_property(bag, (PropertyType.TITLE,), config.title_names)
    if resolved_title is None:
        resolved_title = resolve_property(bag, TEXT_TYPES, config.title_names)
    title = extract_text(resolved_title[1]) if resolved_title else ""
    if not title:
        return None

    if not is_published(bag, config):
        return None

    tags = resolve_tags(bag, config)

    post_id = record.get("id", "")
    slug = slugify(_text_property(bag, config.slug_names) or title)
    if slug in seen_slugs:
        slug = f"{slug}-{normalize_id(post_id)[:6]}"
    seen_slugs.add(slug)

    return Post(
        id=post_id,
        title=title,
        subtitle=_text_property(bag, config.subtitle_names),
        slug=slug,
        content=_text_property(bag, config.content_names),
        tags=tags,
        cover_url=media_url(record.get("cover")) or None,
        url=record.get("public_url") or record.get("url") or None,
        created_at=record.get("created_time"),
        last_edited=record.get("last_edited_time"),
    )


def _timestamp(post: Post) -> float:
    raw = post.last_edited or post.created_at
    if not raw:
        return float("-inf")
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).timestamp()
    except ValueError:
        return float("-inf")


def sort_posts(posts: list[Post]) -> list[Post]:
    """Newest first by last edit (or creation); undated posts last."""
    return sorted(posts, key=_timestamp, reverse=True)


def assemble_posts(records: Iterable[dict[str, Any]], config: NotionPostConfig) -> list[Post]:
    """Turn raw rows into an ordered collection of posts."""
    seen: set[str] = set()
    posts = [post for post in (record_to_post(r, config, seen) for r in records) if post]
    return sort_posts(posts)


def find_post(posts: Iterable[Post], id_or_slug: str) -> Post | None:
    """Return the post whose id (separators ignored) or slug matches."""
    wanted = normalize_id(id_or_slug)
    if not wanted:
        return None
    for post in posts:
        if normalize_id(post.id) == wanted or post.slug == id_or_slug.strip():
            return post
    return None
