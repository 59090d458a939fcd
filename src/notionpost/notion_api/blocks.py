"""Block API wrapper for the Notion API.

:class:`AsyncBlockAPI` wraps ``GET /blocks/{id}/children``.  The
``get_children`` method auto-paginates so callers receive every child of
a block in a single call.
"""

from __future__ import annotations

from typing import Any

from .transport import AsyncNotionTransport


class AsyncBlockAPI:
    """Asynchronous wrapper for the Notion Blocks API.

    Parameters
    ----------
    transport:
        A configured :class:`AsyncNotionTransport` instance.
    """

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def get_children(self, block_id: str) -> list[dict[str, Any]]:
        """Retrieve all children of a block (or page), auto-paginating.

        Parameters
        ----------
        block_id:
            The UUID of the parent block or page.

        Returns
        -------
        list[dict]
            All child block objects in order.
        """
        return [
            item
            async for item in self._transport.paginate(
                f"/blocks/{block_id}/children",
                method="GET",
            )
        ]
