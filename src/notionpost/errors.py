"""Error hierarchy for notionpost.

Every public error class inherits from :class:`NotionPostError`.  Each
carries a machine-readable ``code`` (from :class:`ErrorCode`), a
human-readable ``message``, an optional structured ``context`` dict, and
an optional ``cause`` (chained exception).

Errors also know the HTTP status a boundary handler should answer with
(see :func:`boundary_status`), so web glue never needs to inspect
upstream payloads itself.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error notionpost can raise."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    NOT_FOUND = "NOT_FOUND"
    MALFORMED_PAYLOAD = "MALFORMED_PAYLOAD"
    PARTIAL_ENRICHMENT_FAILURE = "PARTIAL_ENRICHMENT_FAILURE"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class NotionPostError(Exception):
    """Base exception for all notionpost errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` identifying the error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
    cause:
        The underlying exception, if this error wraps another.
    """

    http_status: int = 500

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Concrete errors
# ---------------------------------------------------------------------------

class ConfigurationError(NotionPostError):
    """A required credential or identifier is missing or a setting is invalid.

    Fatal: surfaced as a server-side failure and never retried.

    Context keys: ``setting``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.CONFIGURATION_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class UpstreamError(NotionPostError):
    """The Notion API answered with a non-2xx status, or could not be reached.

    ``status`` is the upstream HTTP status (``None`` for transport-level
    failures) and ``body`` the raw response body.  The body is kept for
    logging only; :attr:`message` stays generic so that it can be shown
    at a boundary without leaking upstream details.

    Context keys: ``method``, ``path``.
    """

    def __init__(
        self,
        message: str,
        status: int | None = None,
        body: Any = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.UPSTREAM_ERROR,
            message=message,
            context=context,
            cause=cause,
        )
        self.status = status
        self.body = body

    @property
    def http_status(self) -> int:  # type: ignore[override]
        if self.status is not None and 400 <= self.status <= 599:
            return self.status
        return 500


class NotFoundError(NotionPostError):
    """No eligible, published post matches the requested id or slug.

    Context keys: ``id_or_slug``.
    """

    http_status = 404

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=message,
            context=context,
            cause=cause,
        )


class MalformedPayloadError(NotionPostError):
    """An upstream response does not have the expected shape.

    Context keys: ``path``, ``field``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.MALFORMED_PAYLOAD,
            message=message,
            context=context,
            cause=cause,
        )


class PartialEnrichmentFailure(NotionPostError):
    """Best-effort body backfill failed for a single post.

    Only ever logged; :meth:`PostClient.list_posts` keeps the post with
    its previous content.

    Context keys: ``post_id``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.PARTIAL_ENRICHMENT_FAILURE,
            message=message,
            context=context,
            cause=cause,
        )


def boundary_status(exc: BaseException) -> int:
    """Return the HTTP status a boundary handler should use for *exc*."""
    if isinstance(exc, NotionPostError):
        return exc.http_status
    return 500
