"""Tests for the synchronous policy-driven fetcher."""

from __future__ import annotations

from unittest.mock import MagicMock

import httpx
import pytest

from fetchcache.cache import CacheStore
from fetchcache.client import HttpxSyncTransport, SyncFetcher
from fetchcache.exceptions import InvalidUsageError, NetworkFailure
from fetchcache.models import FetchConfig, Method
from fetchcache.presets import (
    CACHE_FIRST_JSON,
    CACHE_FIRST_TEXT,
    CACHE_ONLY,
    NETWORK_ONLY_TEXT,
    NO_CACHE,
)

URL = "https://api.example.com/health"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _mock_fetcher(handler, store: CacheStore, config: FetchConfig | None = None) -> SyncFetcher:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return SyncFetcher(cache=store, config=config, transport=HttpxSyncTransport(client))


# ---------------------------------------------------------------------------
# Context manager
# ---------------------------------------------------------------------------


class TestContextManager:
    def test_enter_creates_client(self, store: CacheStore) -> None:
        fetcher = SyncFetcher(cache=store, config=FetchConfig(follow_redirects=False))
        assert fetcher._client is None
        with fetcher:
            assert fetcher._client is not None
            assert fetcher._client.follow_redirects is False
        assert fetcher._client is None
        assert fetcher._transport is None

    def test_injected_transport_is_left_alone(self, store: CacheStore) -> None:
        transport = MagicMock(return_value=httpx.Response(200, text="ok"))
        with SyncFetcher(cache=store, transport=transport) as fetcher:
            fetcher.get(URL)
        assert fetcher._transport is transport

    def test_no_transport_outside_context_manager(self, store: CacheStore) -> None:
        with pytest.raises(InvalidUsageError):
            SyncFetcher(cache=store).get(URL)


# ---------------------------------------------------------------------------
# Policies
# ---------------------------------------------------------------------------


class TestPolicies:
    def test_cache_first_fetches_once(self, store: CacheStore, make_handler) -> None:
        handler = make_handler(text="healthy")
        fetcher = _mock_fetcher(handler, store)

        first = fetcher.get(URL, custom_options=CACHE_FIRST_TEXT)
        second = fetcher.get(URL, custom_options=CACHE_FIRST_TEXT)

        assert isinstance(first, httpx.Response)
        assert first.text == "healthy"
        assert second == "healthy"
        assert handler.calls == 1

    def test_cache_only_never_fetches(self, store: CacheStore, make_handler) -> None:
        handler = make_handler()
        fetcher = _mock_fetcher(handler, store)

        assert fetcher.get(URL, custom_options=CACHE_ONLY) is None
        assert handler.calls == 0

    def test_network_only_refreshes(self, store: CacheStore, make_handler) -> None:
        store.save("GET", URL, "old")
        handler = make_handler(text="new")
        fetcher = _mock_fetcher(handler, store)

        fetcher.get(URL, custom_options=NETWORK_ONLY_TEXT)

        assert store.read("GET", URL) == "new"

    def test_no_cache_leaves_store_alone(self, store: CacheStore, make_handler) -> None:
        fetcher = _mock_fetcher(make_handler(text="x"), store)

        fetcher.get(URL, custom_options=NO_CACHE)

        assert len(store) == 0

    def test_post_scenario(self, store: CacheStore) -> None:
        transport = MagicMock(return_value=httpx.Response(200, json={"id": 9}))
        fetcher = SyncFetcher(cache=store, transport=transport)

        fetcher.post(URL, {"json": {"a": 1}}, CACHE_FIRST_JSON)
        cached = fetcher.post(URL, {"json": {"a": 1}}, CACHE_FIRST_JSON)

        transport.assert_called_once_with(URL, {"json": {"a": 1}, "method": "POST"})
        assert cached == {"id": 9}


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestFailures:
    def test_non_2xx_raises(self, store: CacheStore, make_handler) -> None:
        fetcher = _mock_fetcher(make_handler(500, json={"error": "boom"}), store)

        with pytest.raises(NetworkFailure) as exc_info:
            fetcher.get(URL, custom_options=CACHE_FIRST_JSON)

        assert exc_info.value.response.json() == {"error": "boom"}
        assert len(store) == 0

    def test_unparseable_body_is_returned(self, store: CacheStore, make_handler) -> None:
        fetcher = _mock_fetcher(make_handler(text="not json"), store)

        response = fetcher.get(URL, custom_options=CACHE_FIRST_JSON)

        assert isinstance(response, httpx.Response)
        assert response.text == "not json"
        assert len(store) == 0

    def test_no_content_under_json_handler(self, store: CacheStore, make_handler) -> None:
        fetcher = _mock_fetcher(make_handler(204, content=b""), store)

        response = fetcher.post(URL, custom_options=CACHE_FIRST_JSON)

        assert response.status_code == 204
        assert store.exists("POST", URL) is False

    def test_connect_error_propagates(self, store: CacheStore) -> None:
        def _refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        fetcher = _mock_fetcher(_refuse, store)

        with pytest.raises(httpx.ConnectError):
            fetcher.get(URL, custom_options=CACHE_FIRST_JSON)


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


class TestEntryPoints:
    @pytest.mark.parametrize("method", list(Method))
    def test_each_method(self, store: CacheStore, method: Method) -> None:
        transport = MagicMock(return_value=httpx.Response(200, text="body"))
        fetcher = SyncFetcher(cache=store, transport=transport)

        getattr(fetcher, method.value.lower())(URL)

        transport.assert_called_once_with(URL, {"method": method.value})
        assert store.exists(method, URL)
