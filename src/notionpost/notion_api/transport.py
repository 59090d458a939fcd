"""Async HTTP transport for the Notion API.

The transport owns the full request lifecycle:

1. Send the HTTP request with auth and version headers.
2. On ``2xx`` -- return the parsed JSON response.
3. On anything else -- log the raw body and raise :class:`UpstreamError`.
4. On a transport failure (DNS, reset, timeout) -- raise
   :class:`UpstreamError` without a status.

There is no retry and no caching: failures propagate immediately and the
caller decides what to do with them.

:meth:`AsyncNotionTransport.paginate` drives Notion's cursor pagination
for both ``POST`` endpoints (cursor in the JSON body) and ``GET``
endpoints (cursor in the query string).
"""

from __future__ import annotations

import time
from collections.abc import AsyncIterator
from typing import Any

import httpx

from notionpost.config import NotionPostConfig
from notionpost.errors import MalformedPayloadError, UpstreamError
from notionpost.observability import NoopMetricsHook, get_logger

log = get_logger("notionpost.transport")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _read_body(response: httpx.Response) -> Any:
    """Return the JSON body of *response*, or its text if it is not JSON."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text[:2000]


def _raise_for_status(response: httpx.Response, method: str, path: str) -> None:
    """Log and raise :class:`UpstreamError` for a non-2xx *response*."""
    status = response.status_code
    body = _read_body(response)
    log.error(
        "Notion API request failed",
        extra={
            "extra_fields": {
                "op": "request",
                "method": method,
                "path": path,
                "status_code": status,
                "body": body,
            }
        },
    )
    raise UpstreamError(
        message=f"Notion API responded with status {status}",
        status=status,
        body=body,
        context={"method": method, "path": path},
    )


# ---------------------------------------------------------------------------
# Async transport
# ---------------------------------------------------------------------------

class AsyncNotionTransport:
    """Asynchronous HTTP transport with auth headers and pagination.

    Parameters
    ----------
    config:
        A :class:`NotionPostConfig` instance controlling transport behaviour.
    """

    def __init__(self, config: NotionPostConfig) -> None:
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()

        proxy: httpx.URL | str | None = config.http_proxy
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            headers={
                "Authorization": f"Bearer {config.token}",
                "Notion-Version": config.notion_version,
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(config.timeout_seconds),
            proxy=proxy,
        )

    # -- public API --------------------------------------------------------

    async def request(self, method: str, path: str, **kwargs: Any) -> dict:
        """Execute one HTTP request against the Notion API.

        Parameters
        ----------
        method:
            HTTP method (``GET`` or ``POST``).
        path:
            API path relative to ``base_url`` (e.g. ``/databases/x/query``).
        **kwargs:
            Forwarded to :meth:`httpx.AsyncClient.request` (``json=``,
            ``params=``, ``headers=``).

        Returns
        -------
        dict
            Parsed JSON response body (``{}`` for empty responses).

        Raises
        ------
        UpstreamError
            On non-2xx responses and transport-level failures.
        """
        t0 = time.monotonic()
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            self._metrics.increment(
                "notionpost.requests_total",
                tags={"method": method, "path": path, "status": "error"},
            )
            log.error(
                "Notion API unreachable",
                extra={
                    "extra_fields": {
                        "op": "request",
                        "method": method,
                        "path": path,
                        "error": str(exc),
                    }
                },
            )
            raise UpstreamError(
                message=f"Network error on {method} {path}",
                context={"method": method, "path": path},
                cause=exc,
            ) from exc
        elapsed_ms = (time.monotonic() - t0) * 1000

        tags = {"method": method, "path": path, "status": str(response.status_code)}
        self._metrics.increment("notionpost.requests_total", tags=tags)
        self._metrics.timing("notionpost.request_duration_ms", elapsed_ms, tags=tags)

        if not 200 <= response.status_code < 300:
            _raise_for_status(response, method, path)

        if response.status_code == 204 or not response.content:
            return {}
        try:
            result = response.json()
        except ValueError as exc:
            raise MalformedPayloadError(
                message=f"Response to {method} {path} is not valid JSON",
                context={"path": path},
                cause=exc,
            ) from exc
        if not isinstance(result, dict):
            raise MalformedPayloadError(
                message=f"Response to {method} {path} is not a JSON object",
                context={"path": path},
            )
        return result

    async def paginate(
        self,
        path: str,
        *,
        method: str = "GET",
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        max_pages: int | None = None,
    ) -> AsyncIterator[dict]:
        """Auto-paginate a Notion list endpoint, yielding each result item.

        ``page_size`` is always sent; ``start_cursor`` is added from the
        second page on.  For ``POST`` endpoints both go into the JSON
        body, otherwise into the query string.  Iteration stops when
        ``has_more`` is false, when no ``next_cursor`` is returned, or
        after *max_pages* pages (default ``config.max_pages``).

        Raises
        ------
        MalformedPayloadError
            If a page's ``results`` is not a list.
        """
        limit = max_pages if max_pages is not None else self._config.max_pages
        use_body = method.upper() in ("POST", "PATCH")
        cursor: str | None = None
        pages = 0

        while True:
            if pages >= limit:
                log.warning(
                    "Pagination limit reached",
                    extra={
                        "extra_fields": {
                            "op": "paginate",
                            "path": path,
                            "max_pages": limit,
                        }
                    },
                )
                break

            page_args: dict[str, Any] = {"page_size": self._config.page_size}
            if cursor is not None:
                page_args["start_cursor"] = cursor

            if use_body:
                data = await self.request(method, path, json={**(json or {}), **page_args})
            else:
                data = await self.request(method, path, params={**(params or {}), **page_args})
            pages += 1

            results = data.get("results", [])
            if not isinstance(results, list):
                raise MalformedPayloadError(
                    message=f"Expected a list of results from {path}",
                    context={"path": path, "field": "results"},
                )
            for item in results:
                yield item

            if not data.get("has_more", False):
                break
            cursor = data.get("next_cursor")
            if not cursor:
                break

    async def fetch_all_pages(
        self,
        path: str,
        body: dict[str, Any] | None = None,
        *,
        method: str = "POST",
        max_pages: int | None = None,
    ) -> list[dict]:
        """Drain :meth:`paginate` into a list, preserving order."""
        kwargs: dict[str, Any] = {"method": method, "max_pages": max_pages}
        if method.upper() in ("POST", "PATCH"):
            kwargs["json"] = body
        else:
            kwargs["params"] = body
        return [item async for item in self.paginate(path, **kwargs)]

    async def close(self) -> None:
        """Close the underlying async HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncNotionTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
