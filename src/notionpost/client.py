"""Asynchronous post client.

:class:`PostClient` is the entry point of the package.  Each call owns
its own fetch / transform pipeline; nothing is cached between calls.

Usage::

    import asyncio
    from notionpost import NotionPostConfig, PostClient

    async def main():
        async with PostClient(NotionPostConfig.from_env()) as client:
            for post in await client.list_posts():
                print(post.slug, post.title)

    asyncio.run(main())
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

from notionpost.config import NotionPostConfig
from notionpost.converter import RenderTarget, render, render_plain_text
from notionpost.errors import PartialEnrichmentFailure
from notionpost.models import Block, Post
from notionpost.notion_api.blocks import AsyncBlockAPI
from notionpost.notion_api.databases import AsyncDatabaseAPI
from notionpost.notion_api.transport import AsyncNotionTransport
from notionpost.observability import NoopMetricsHook, get_logger
from notionpost.posts import assemble_posts, find_post, normalize_id
from notionpost.tree import BlockTreeFetcher

log = get_logger("notionpost.client")


class PostClient:
    """List and fetch blog posts stored in a Notion database.

    Parameters
    ----------
    config:
        A validated :class:`NotionPostConfig`.
    """

    def __init__(self, config: NotionPostConfig) -> None:
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._transport = AsyncNotionTransport(config)
        self._databases = AsyncDatabaseAPI(self._transport)
        self._blocks = AsyncBlockAPI(self._transport)
        self._fetcher = BlockTreeFetcher(
            self._blocks,
            max_depth=config.max_depth,
            concurrency=config.fetch_concurrency,
            metrics=self._metrics,
        )

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def list_posts(self) -> list[Post]:
        """Return every published post, newest first.

        Posts whose ``content`` property is empty get a best-effort body
        backfill (when ``config.backfill_content`` is set); a post whose
        backfill fails keeps its empty content.
        """
        posts = await self._load_posts()

        if self._config.backfill_content:
            missing = [p for p in posts if not p.content]
            if missing:
                await self._backfill(missing)

        self._metrics.increment("notionpost.posts_listed_total", len(posts))
        log.info(
            "Posts listed",
            extra={"extra_fields": {"op": "list_posts", "posts": len(posts)}},
        )
        return posts

    async def get_post(self, id_or_slug: str) -> Post | None:
        """Return one published post with its body, or ``None``.

        Parameters
        ----------
        id_or_slug:
            A page id (dashed or not) or a post slug.
        """
        if not normalize_id(id_or_slug):
            return None

        posts = await self._load_posts()
        post = find_post(posts, id_or_slug)
        if post is None:
            log.info(
                "Post not found",
                extra={"extra_fields": {"op": "get_post", "id_or_slug": id_or_slug}},
            )
            return None

        await self._fill_body(post)
        return post

    async def fetch_blocks(self, page_id: str) -> list[Block]:
        """Return the block tree of *page_id* down to ``config.max_depth``."""
        return await self._fetcher.fetch_tree(page_id, self._config.max_depth)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the underlying HTTP transport."""
        await self._transport.close()

    async def __aenter__(self) -> PostClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _load_posts(self) -> list[Post]:
        records = await self._databases.query(self._config.database_id)
        return assemble_posts(records, self._config)

    async def _fill_body(self, post: Post) -> None:
        blocks = await self.fetch_blocks(post.id)

        t0 = time.monotonic()
        markdown = render(blocks, RenderTarget.MARKDOWN)
        html = render(blocks, RenderTarget.HTML)
        self._metrics.timing(
            "notionpost.render_duration_ms",
            (time.monotonic() - t0) * 1000,
            tags={"target": "markdown+html"},
        )

        post.markdown = markdown
        post.content_html = html
        post.content = render_plain_text(blocks) or post.content

    async def _backfill(self, posts: list[Post]) -> None:
        semaphore = asyncio.Semaphore(self._config.backfill_concurrency)

        async def enrich(post: Post) -> None:
            async with semaphore:
                try:
                    await self._fill_body(post)
                except Exception as exc:  # noqa: BLE001 - isolated per post
                    failure = PartialEnrichmentFailure(
                        message=f"Body backfill failed for post {post.id}",
                        context={"post_id": post.id},
                        cause=exc,
                    )
                    self._metrics.increment("notionpost.backfill_failures_total")
                    log.warning(
                        failure.message,
                        extra={
                            "extra_fields": {
                                "op": "backfill",
                                "code": failure.code,
                                "post_id": post.id,
                                "error": repr(exc),
                            }
                        },
                    )

        await asyncio.gather(*(enrich(p) for p in posts))
