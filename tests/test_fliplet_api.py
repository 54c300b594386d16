"""
Tests for the Fliplet API client.

These tests verify:
1. Authenticated GET requests and accessor paths
2. Retry with backoff on 429 and network faults
3. Immediate failure on other error statuses
4. Row listing truncation
"""

import asyncio

import httpx
import pytest

from fliplet_agent.infra.fliplet_api import FlipletAPI, locate_entries, truncate_entries
from fliplet_agent.utils.errors import (
    BackendRetryExhaustedError,
    BackendStatusError,
    ConfigurationError,
)


def make_api(handler, **kwargs) -> FlipletAPI:
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler),
        base_url="https://api.fliplet.com",
    )
    kwargs.setdefault("retry_base_delay", 0)
    return FlipletAPI(token="secret-token", client=client, **kwargs)


def run(coro):
    return asyncio.run(coro)


class TestRequest:
    """Test FlipletAPI.request()"""

    def test_sends_auth_token_and_returns_json(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"app": {"id": 123}})

        api = make_api(handler)
        assert run(api.request("/v1/apps/123")) == {"app": {"id": 123}}
        assert seen[0].headers["Auth-token"] == "secret-token"
        assert seen[0].method == "GET"
        assert seen[0].url.path == "/v1/apps/123"

    def test_rate_limited_three_times_fails_after_three_attempts(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            return httpx.Response(429)

        api = make_api(handler)
        with pytest.raises(BackendRetryExhaustedError) as exc_info:
            run(api.request("/v1/apps/1"))

        assert len(attempts) == 3
        assert "Failed after 3 attempts" in str(exc_info.value)
        assert exc_info.value.attempts == 3
        assert isinstance(exc_info.value.last_error, BackendStatusError)

    def test_rate_limit_then_success(self):
        responses = iter([httpx.Response(429), httpx.Response(429), httpx.Response(200, json=[1, 2])])

        api = make_api(lambda request: next(responses))
        assert run(api.request("/v1/data-sources?appId=1")) == [1, 2]

    def test_backoff_delays_grow_exponentially(self, monkeypatch):
        delays = []

        async def fake_sleep(delay):
            delays.append(delay)

        monkeypatch.setattr("fliplet_agent.infra.fliplet_api.asyncio.sleep", fake_sleep)
        api = make_api(lambda request: httpx.Response(429), retry_base_delay=0.5, max_retries=4)

        with pytest.raises(BackendRetryExhaustedError):
            run(api.request("/v1/apps/1"))

        # No wait after the final attempt
        assert delays == [0.5, 1.0, 2.0]

    def test_client_error_is_not_retried(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            return httpx.Response(403, text="x" * 500)

        api = make_api(handler)
        with pytest.raises(BackendStatusError) as exc_info:
            run(api.request("/v1/apps/1"))

        assert len(attempts) == 1
        assert exc_info.value.status_code == 403
        assert exc_info.value.body == "x" * 200
        assert str(exc_info.value).startswith("403 Forbidden - ")

    def test_server_error_is_not_retried(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            return httpx.Response(500, text="boom")

        api = make_api(handler)
        with pytest.raises(BackendStatusError):
            run(api.request("/v1/apps/1"))
        assert len(attempts) == 1

    def test_network_error_is_retried(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            if len(attempts) < 3:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json={"ok": True})

        api = make_api(handler)
        assert run(api.request("/v1/apps/1")) == {"ok": True}
        assert len(attempts) == 3

    def test_network_error_exhausts_budget(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        api = make_api(handler)
        with pytest.raises(BackendRetryExhaustedError) as exc_info:
            run(api.request("/v1/apps/1"))

        assert isinstance(exc_info.value.last_error, httpx.ReadTimeout)
        assert exc_info.value.__cause__ is exc_info.value.last_error

    def test_missing_token_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError):
            FlipletAPI(token="")


class TestAccessors:
    """Test the domain accessors hit the right paths"""

    def test_paths(self):
        seen = []

        def handler(request):
            seen.append(str(request.url))
            return httpx.Response(200, json={})

        api = make_api(handler)

        async def call_all():
            await api.get_app(1)
            await api.list_data_sources(1)
            await api.get_data_source(2)
            await api.get_data_source_entries(2)
            await api.list_media_folders(1)
            await api.get_folder_files(3)
            await api.get_file(4)
            await api.aclose()

        run(call_all())

        base = "https://api.fliplet.com"
        assert seen == [
            f"{base}/v1/apps/1",
            f"{base}/v1/data-sources?appId=1",
            f"{base}/v1/data-sources/2",
            f"{base}/v1/data-sources/2/data",
            f"{base}/v1/media/folders?appId=1",
            f"{base}/v1/media/folders/3/files",
            f"{base}/v1/media/files/4",
        ]

    def test_entries_are_truncated(self):
        rows = [{"id": i} for i in range(120)]
        api = make_api(lambda request: httpx.Response(200, json={"entries": rows}))

        result = run(api.get_data_source_entries(7))

        assert result["truncated"] is True
        assert result["totalCount"] == 120
        assert result["shownCount"] == 50
        assert result["entries"] == rows[:50]


class TestTruncateEntries:
    """Test truncate_entries()"""

    def test_small_listing_passes_through(self):
        data = {"entries": [{"id": i} for i in range(50)], "meta": "kept"}
        assert truncate_entries(data, 50) is data

    def test_small_bare_list_passes_through(self):
        data = [{"id": i} for i in range(3)]
        assert truncate_entries(data, 50) is data

    def test_large_bare_list_is_capped(self):
        data = [{"id": i} for i in range(51)]
        result = truncate_entries(data, 50)

        assert result["shownCount"] == 50
        assert result["totalCount"] == 51
        assert result["entries"] == data[:50]
        assert "first 50 of 51" in result["note"]

    def test_large_wrapped_listing_is_capped_in_order(self):
        data = {"entries": [{"id": i} for i in range(200, 0, -1)]}
        result = truncate_entries(data, 50)

        assert [row["id"] for row in result["entries"]] == list(range(200, 150, -1))

    def test_unknown_shape_passes_through(self):
        data = {"rows": [{"id": i} for i in range(100)]}
        assert truncate_entries(data, 50) is data
        assert locate_entries(data) is None
        assert locate_entries("text") is None
