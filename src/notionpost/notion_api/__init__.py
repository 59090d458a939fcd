"""notionpost.notion_api -- Notion API transport and endpoint wrappers.

This sub-package provides:

* :mod:`.transport` -- HTTP transport with auth headers and cursor pagination.
* :mod:`.databases` -- Database query wrapper.
* :mod:`.blocks` -- Block children wrapper.
"""

from __future__ import annotations

from .blocks import AsyncBlockAPI
from .databases import AsyncDatabaseAPI
from .transport import AsyncNotionTransport

__all__ = [
    "AsyncBlockAPI",
    "AsyncDatabaseAPI",
    "AsyncNotionTransport",
]
