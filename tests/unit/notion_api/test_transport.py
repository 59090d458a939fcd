"""Unit tests for notionpost/notion_api/transport.py.

Covers:
- AsyncNotionTransport.request (success, non-2xx, network errors, bad JSON)
- AsyncNotionTransport.paginate (POST body cursor, GET query cursor,
  draining, guards, malformed results)
- AsyncNotionTransport.fetch_all_pages
"""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from notionpost.config import NotionPostConfig
from notionpost.errors import MalformedPayloadError, UpstreamError
from notionpost.notion_api.transport import AsyncNotionTransport

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_response(
    status_code: int = 200,
    body: dict | list | None = None,
    text: str | None = None,
) -> httpx.Response:
    """Build a minimal httpx.Response with a request attached."""
    if body is not None:
        content = json.dumps(body).encode()
    elif text is not None:
        content = text.encode()
    else:
        content = b""
    resp = httpx.Response(status_code, content=content)
    resp.request = httpx.Request("GET", "https://api.notion.com/v1/test")
    return resp


def make_config(**overrides) -> NotionPostConfig:
    defaults = dict(token="test-token-1234", database_id="db-1")
    defaults.update(overrides)
    return NotionPostConfig(**defaults)


def page(ids, has_more=False, cursor=None) -> httpx.Response:
    return make_response(200, body={
        "results": [{"id": i} for i in ids],
        "has_more": has_more,
        "next_cursor": cursor,
    })


# ---------------------------------------------------------------------------
# request()
# ---------------------------------------------------------------------------

class TestRequest:
    async def test_200_returns_json(self):
        transport = AsyncNotionTransport(make_config())
        resp = make_response(200, body={"id": "page-1"})
        with patch.object(transport._client, "request", new=AsyncMock(return_value=resp)):
            result = await transport.request("GET", "/pages/page-1")
        assert result == {"id": "page-1"}
        await transport.close()

    async def test_204_returns_empty_dict(self):
        transport = AsyncNotionTransport(make_config())
        resp = make_response(204)
        with patch.object(transport._client, "request", new=AsyncMock(return_value=resp)):
            assert await transport.request("GET", "/x") == {}
        await transport.close()

    async def test_headers_carry_token_and_version(self):
        transport = AsyncNotionTransport(make_config(notion_version="2022-06-28"))
        headers = transport._client.headers
        assert headers["Authorization"] == "Bearer test-token-1234"
        assert headers["Notion-Version"] == "2022-06-28"
        await transport.close()

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 429, 500, 503])
    async def test_non_2xx_raises_upstream_error_with_status(self, status):
        transport = AsyncNotionTransport(make_config())
        resp = make_response(status, body={"code": "x", "message": "secret detail"})
        with (
            patch.object(transport._client, "request", new=AsyncMock(return_value=resp)),
            pytest.raises(UpstreamError) as exc_info,
        ):
            await transport.request("GET", "/x")
        err = exc_info.value
        assert err.status == status
        assert err.body == {"code": "x", "message": "secret detail"}
        assert "secret detail" not in err.message
        await transport.close()

    async def test_non_json_error_body_is_kept_as_text(self):
        transport = AsyncNotionTransport(make_config())
        resp = make_response(502, text="<html>bad gateway</html>")
        with (
            patch.object(transport._client, "request", new=AsyncMock(return_value=resp)),
            pytest.raises(UpstreamError) as exc_info,
        ):
            await transport.request("GET", "/x")
        assert exc_info.value.body == "<html>bad gateway</html>"
        await transport.close()

    async def test_no_retry_on_failure(self):
        transport = AsyncNotionTransport(make_config())
        mock = AsyncMock(return_value=make_response(503, body={}))
        with patch.object(transport._client, "request", new=mock), pytest.raises(UpstreamError):
            await transport.request("GET", "/x")
        assert mock.await_count == 1
        await transport.close()

    async def test_network_error_raises_upstream_error_without_status(self):
        transport = AsyncNotionTransport(make_config())
        mock = AsyncMock(side_effect=httpx.ConnectError("boom"))
        with (
            patch.object(transport._client, "request", new=mock),
            pytest.raises(UpstreamError) as exc_info,
        ):
            await transport.request("GET", "/x")
        assert exc_info.value.status is None
        assert exc_info.value.http_status == 500
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        await transport.close()

    async def test_invalid_json_raises_malformed_payload(self):
        transport = AsyncNotionTransport(make_config())
        resp = make_response(200, text="not json")
        with (
            patch.object(transport._client, "request", new=AsyncMock(return_value=resp)),
            pytest.raises(MalformedPayloadError),
        ):
            await transport.request("GET", "/x")
        await transport.close()

    async def test_metrics_hook_receives_request_counter(self):
        calls = []

        class Recorder:
            def increment(self, name, value=1, tags=None):
                calls.append((name, tags))

            def timing(self, name, ms, tags=None):
                calls.append((name, tags))

        transport = AsyncNotionTransport(make_config(metrics=Recorder()))
        resp = make_response(200, body={})
        with patch.object(transport._client, "request", new=AsyncMock(return_value=resp)):
            await transport.request("GET", "/x")
        names = [name for name, _ in calls]
        assert "notionpost.requests_total" in names
        assert "notionpost.request_duration_ms" in names
        assert calls[0][1]["status"] == "200"
        await transport.close()


# ---------------------------------------------------------------------------
# paginate() / fetch_all_pages()
# ---------------------------------------------------------------------------

class TestPaginate:
    async def test_three_pages_drain_in_order(self):
        transport = AsyncNotionTransport(make_config())
        first = [f"a{i}" for i in range(100)]
        second = [f"b{i}" for i in range(100)]
        third = [f"c{i}" for i in range(37)]
        mock = AsyncMock(side_effect=[
            page(first, True, "cur-1"),
            page(second, True, "cur-2"),
            page(third, False, None),
        ])
        with patch.object(transport._client, "request", new=mock):
            items = await transport.fetch_all_pages("/databases/db-1/query", {"filter": {}})
        assert len(items) == 237
        assert [i["id"] for i in items] == first + second + third
        await transport.close()

    async def test_post_cursor_goes_into_json_body(self):
        transport = AsyncNotionTransport(make_config())
        mock = AsyncMock(side_effect=[page(["a"], True, "cur-1"), page(["b"])])
        with patch.object(transport._client, "request", new=mock):
            await transport.fetch_all_pages("/databases/db-1/query", {"sorts": []})

        first_call, second_call = mock.call_args_list
        assert first_call.args == ("POST", "/databases/db-1/query")
        assert first_call.kwargs["json"] == {"sorts": [], "page_size": 100}
        assert second_call.kwargs["json"] == {
            "sorts": [], "page_size": 100, "start_cursor": "cur-1",
        }
        await transport.close()

    async def test_get_cursor_goes_into_query_string(self):
        transport = AsyncNotionTransport(make_config(page_size=50))
        mock = AsyncMock(side_effect=[page(["a"], True, "cur-1"), page(["b"])])
        with patch.object(transport._client, "request", new=mock):
            items = [i async for i in transport.paginate("/blocks/x/children")]

        assert [i["id"] for i in items] == ["a", "b"]
        assert mock.call_args_list[0].kwargs["params"] == {"page_size": 50}
        assert mock.call_args_list[1].kwargs["params"] == {
            "page_size": 50, "start_cursor": "cur-1",
        }
        await transport.close()

    async def test_has_more_without_cursor_stops(self):
        transport = AsyncNotionTransport(make_config())
        mock = AsyncMock(return_value=page(["a"], True, None))
        with patch.object(transport._client, "request", new=mock):
            items = [i async for i in transport.paginate("/blocks/x/children")]
        assert items == [{"id": "a"}]
        assert mock.await_count == 1
        await transport.close()

    async def test_max_pages_guard_stops_endless_pagination(self):
        transport = AsyncNotionTransport(make_config())
        mock = AsyncMock(return_value=page(["a"], True, "same-cursor"))
        with patch.object(transport._client, "request", new=mock):
            items = [i async for i in transport.paginate("/blocks/x/children", max_pages=5)]
        assert len(items) == 5
        assert mock.await_count == 5
        await transport.close()

    async def test_config_max_pages_is_default_guard(self):
        transport = AsyncNotionTransport(make_config(max_pages=3))
        mock = AsyncMock(return_value=page(["a"], True, "c"))
        with patch.object(transport._client, "request", new=mock):
            items = await transport.fetch_all_pages("/blocks/x/children", method="GET")
        assert len(items) == 3
        await transport.close()

    async def test_missing_results_key_yields_nothing(self):
        transport = AsyncNotionTransport(make_config())
        resp = make_response(200, body={"has_more": False})
        with patch.object(transport._client, "request", new=AsyncMock(return_value=resp)):
            items = [i async for i in transport.paginate("/blocks/x/children")]
        assert items == []
        await transport.close()

    async def test_non_list_results_raises_malformed_payload(self):
        transport = AsyncNotionTransport(make_config())
        resp = make_response(200, body={"results": {"id": "a"}, "has_more": False})
        with (
            patch.object(transport._client, "request", new=AsyncMock(return_value=resp)),
            pytest.raises(MalformedPayloadError) as exc_info,
        ):
            [i async for i in transport.paginate("/blocks/x/children")]
        assert exc_info.value.context["field"] == "results"
        await transport.close()

    async def test_error_mid_pagination_propagates(self):
        transport = AsyncNotionTransport(make_config())
        mock = AsyncMock(side_effect=[page(["a"], True, "c"), make_response(500, body={})])
        with patch.object(transport._client, "request", new=mock), pytest.raises(UpstreamError):
            await transport.fetch_all_pages("/databases/db-1/query")
        await transport.close()


class TestLifecycle:
    async def test_async_context_manager_closes_client(self):
        transport = AsyncNotionTransport(make_config())
        with patch.object(transport._client, "aclose", new=AsyncMock()) as mock_close:
            async with transport:
                pass
        mock_close.assert_awaited_once()
