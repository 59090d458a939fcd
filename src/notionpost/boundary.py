"""Framework-neutral request handlers.

Web glue (an API route, a serverless function, a static-site build step)
calls these helpers and forwards ``status`` and ``body`` as JSON.  Every
exception is caught here: known errors map to their HTTP status,
anything else becomes a generic 500, and the real error is only logged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from notionpost.client import PostClient
from notionpost.errors import (
    ConfigurationError,
    NotFoundError,
    NotionPostError,
    UpstreamError,
    boundary_status,
)
from notionpost.observability import get_logger

log = get_logger("notionpost.boundary")

_PUBLIC_MESSAGES: dict[type[NotionPostError], str] = {
    ConfigurationError: "Server is not configured",
    UpstreamError: "Failed to fetch from Notion",
    NotFoundError: "Post not found",
}
_GENERIC_MESSAGE = "Failed to load posts"


@dataclass(frozen=True)
class BoundaryResponse:
    """Status code and JSON-serialisable body for one handled request."""

    status: int
    body: dict[str, Any]


def error_response(exc: BaseException) -> BoundaryResponse:
    """Log *exc* and translate it into a response without leaking details."""
    status = boundary_status(exc)
    fields: dict[str, Any] = {"op": "boundary", "status": status, "error": repr(exc)}
    if isinstance(exc, UpstreamError):
        fields["upstream_status"] = exc.status
        fields["upstream_body"] = exc.body
    if status >= 500:
        log.error("Request failed", exc_info=exc, extra={"extra_fields": fields})
    else:
        log.info("Request rejected", extra={"extra_fields": fields})

    message = _GENERIC_MESSAGE
    for error_type, text in _PUBLIC_MESSAGES.items():
        if isinstance(exc, error_type):
            message = text
            break
    return BoundaryResponse(status=status, body={"error": message})


async def handle_list_posts(client: PostClient) -> BoundaryResponse:
    """``GET /posts``: every published post, newest first."""
    try:
        posts = await client.list_posts()
    except Exception as exc:  # noqa: BLE001 - boundary maps every failure
        return error_response(exc)
    return BoundaryResponse(status=200, body={"posts": [p.to_dict() for p in posts]})


async def handle_get_post(client: PostClient, id_or_slug: str | None) -> BoundaryResponse:
    """``GET /posts/<id or slug>``: one post with its rendered body."""
    try:
        post = await client.get_post(id_or_slug or "")
        if post is None:
            raise NotFoundError(
                message=f"No published post matches {id_or_slug!r}",
                context={"id_or_slug": id_or_slug},
            )
    except Exception as exc:  # noqa: BLE001 - boundary maps every failure
        return error_response(exc)
    return BoundaryResponse(status=200, body=post.to_dict())
