"""Database API wrapper for the Notion API.

:class:`AsyncDatabaseAPI` exposes the one database endpoint the post
pipeline needs: ``POST /databases/{id}/query``, auto-paginated.
"""

from __future__ import annotations

from typing import Any

from .transport import AsyncNotionTransport

# Newest edits first; the assembler re-sorts, but this keeps early pages
# relevant when the pagination guard trips.
DEFAULT_SORTS: list[dict[str, str]] = [
    {"timestamp": "last_edited_time", "direction": "descending"},
]


class AsyncDatabaseAPI:
    """Asynchronous wrapper for the Notion Databases API.

    Parameters
    ----------
    transport:
        A configured :class:`AsyncNotionTransport` instance.
    """

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def query(
        self,
        database_id: str,
        body: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Return every row of *database_id*, following pagination cursors.

        Parameters
        ----------
        database_id:
            The UUID of the database (with or without hyphens).
        body:
            Optional query body (``filter``, ``sorts``).  When no ``sorts``
            are given, rows come back most recently edited first.

        Returns
        -------
        list[dict]
            Raw page objects in the order returned by Notion.
        """
        payload: dict[str, Any] = {"sorts": DEFAULT_SORTS}
        if body:
            payload.update(body)
        return await self._transport.fetch_all_pages(
            f"/databases/{database_id}/query",
            payload,
            method="POST",
        )
