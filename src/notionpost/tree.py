"""Depth-bounded retrieval of a page's block tree.

:class:`BlockTreeFetcher` walks the tree level by level.  The children of
every block on one level are requested concurrently (bounded by a
semaphore) and attached in order, so the output keeps document order
while sibling subtrees load in parallel.  The walk is iterative: a deep
page never grows the Python call stack.

Blocks at ``max_depth`` keep ``has_children=True`` but get no children,
so pathologically deep pages still render, just truncated.
"""

from __future__ import annotations

import asyncio

from notionpost.models import Block
from notionpost.notion_api.blocks import AsyncBlockAPI
from notionpost.observability import NoopMetricsHook, get_logger

log = get_logger("notionpost.tree")

DEFAULT_MAX_DEPTH = 10


class BlockTreeFetcher:
    """Fetch a page's blocks together with their descendants.

    Parameters
    ----------
    blocks:
        The block API used to list children.
    max_depth:
        Deepest level fetched.  The page's own children are depth 1.
    concurrency:
        Maximum number of ``list children`` calls in flight.
    metrics:
        Optional :class:`~notionpost.observability.MetricsHook`.
    """

    def __init__(
        self,
        blocks: AsyncBlockAPI,
        max_depth: int = DEFAULT_MAX_DEPTH,
        concurrency: int = 8,
        metrics: object | None = None,
    ) -> None:
        self._blocks = blocks
        self._max_depth = max_depth
        self._concurrency = concurrency
        self._metrics = metrics if metrics is not None else NoopMetricsHook()

    async def fetch_tree(self, block_id: str, max_depth: int | None = None) -> list[Block]:
        """Return the children of *block_id* with descendants attached.

        Parameters
        ----------
        block_id:
            Page or block whose content is fetched.
        max_depth:
            Overrides the fetcher's default depth bound for this call.
        """
        limit = self._max_depth if max_depth is None else max_depth
        semaphore = asyncio.Semaphore(self._concurrency)

        async def children_of(parent_id: str, depth: int) -> list[Block]:
            async with semaphore:
                raw = await self._blocks.get_children(parent_id)
            self._metrics.increment("notionpost.blocks_fetched_total", len(raw))
            return [Block.from_api(item, depth) for item in raw if isinstance(item, dict)]

        roots = await children_of(block_id, 1)
        level = roots
        truncated = 0

        while level:
            expandable = [b for b in level if b.has_children and b.id]
            if not expandable:
                break
            if expandable[0].depth >= limit:
                truncated = len(expandable)
                break

            results = await asyncio.gather(
                *(children_of(b.id, b.depth + 1) for b in expandable)
            )
            next_level: list[Block] = []
            for parent, children in zip(expandable, results):
                parent.children = children
                next_level.extend(children)
            level = next_level

        if truncated:
            log.info(
                "Block tree truncated at depth bound",
                extra={
                    "extra_fields": {
                        "op": "fetch_tree",
                        "block_id": block_id,
                        "max_depth": limit,
                        "truncated_blocks": truncated,
                    }
                },
            )
        return roots
