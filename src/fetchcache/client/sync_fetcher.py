"""Synchronous policy-driven fetcher -- mirrors :class:`~fetchcache.client.async_fetcher.AsyncFetcher`.

:class:`SyncFetcher` offers the same policy semantics, cache sharing and
entry points as the async fetcher, backed by :class:`httpx.Client` for code
that does not run an event loop (scripts, the ``fetchcache`` CLI).
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx

from fetchcache.cache import CacheStore
from fetchcache.client.base import CustomOptionsLike, FetcherBase
from fetchcache.client.transport import HttpxSyncTransport, SyncTransport
from fetchcache.exceptions import InvalidUsageError
from fetchcache.models import FetchConfig, Method, coerce_method

logger = logging.getLogger(__name__)


class SyncFetcher(FetcherBase):
    """Blocking fetcher that caches responses according to per-request policy.

    Args:
        cache: Store to use. Defaults to the process-wide store.
        config: Default policy, default parse handler, and httpx settings.
        transport: Optional callable ``(url, options) -> Response``.

    Example::

        with SyncFetcher(config=FetchConfig(default_cache_policy="cache-first")) as fetcher:
            fetcher.get("https://api.example.com/health")   # network
            fetcher.get("https://api.example.com/health")   # cached text
    """

    def __init__(
        self,
        cache: Optional[CacheStore] = None,
        config: Optional[FetchConfig] = None,
        transport: Optional[SyncTransport] = None,
    ) -> None:
        super().__init__(cache=cache, config=config)
        self._transport: Optional[SyncTransport] = transport
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> SyncFetcher:
        if self._transport is None:
            self._client = httpx.Client(
                timeout=self._config.timeout,
                verify=self._config.verify_ssl,
                follow_redirects=self._config.follow_redirects,
            )
            self._transport = HttpxSyncTransport(self._client)
        return self

    def __exit__(self, *args: object) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            self._transport = None

    # ------------------------------------------------------------------ #
    # Dispatch
    # ------------------------------------------------------------------ #

    def dispatch(
        self,
        method: Method | str,
        url: str,
        options: Optional[Mapping[str, Any]] = None,
        custom_options: CustomOptionsLike = None,
    ) -> Any:
        """Send or serve a request according to its cache policy.

        Behaves exactly like
        :meth:`~fetchcache.client.async_fetcher.AsyncFetcher.dispatch`, but
        blocks.
        """
        group = coerce_method(method)
        policy, handler = self.resolve_options(custom_options)

        if not self.should_call_network(policy, group, url):
            return self.read_cached(policy, group, url)

        transport = self._require_transport()
        logger.debug("Network request (%s): %s %s", policy.value, group.value, url)
        response = transport(url, self.merge_options(options, group))
        response.read()

        self.raise_for_failure(response)
        self.store_response(policy, group, url, response, handler)
        return response

    def get(
        self,
        url: str,
        options: Optional[Mapping[str, Any]] = None,
        custom_options: CustomOptionsLike = None,
    ) -> Any:
        """Dispatch a GET request. See :meth:`dispatch`."""
        return self.dispatch(Method.GET, url, options, custom_options)

    def head(
        self,
        url: str,
        options: Optional[Mapping[str, Any]] = None,
        custom_options: CustomOptionsLike = None,
    ) -> Any:
        """Dispatch a HEAD request. See :meth:`dispatch`."""
        return self.dispatch(Method.HEAD, url, options, custom_options)

    def post(
        self,
        url: str,
        options: Optional[Mapping[str, Any]] = None,
        custom_options: CustomOptionsLike = None,
    ) -> Any:
        """Dispatch a POST request. See :meth:`dispatch`."""
        return self.dispatch(Method.POST, url, options, custom_options)

    def connect(
        self,
        url: str,
        options: Optional[Mapping[str, Any]] = None,
        custom_options: CustomOptionsLike = None,
    ) -> Any:
        """Dispatch a CONNECT request. See :meth:`dispatch`."""
        return self.dispatch(Method.CONNECT, url, options, custom_options)

    def trace(
        self,
        url: str,
        options: Optional[Mapping[str, Any]] = None,
        custom_options: CustomOptionsLike = None,
    ) -> Any:
        """Dispatch a TRACE request. See :meth:`dispatch`."""
        return self.dispatch(Method.TRACE, url, options, custom_options)

    def track(
        self,
        url: str,
        options: Optional[Mapping[str, Any]] = None,
        custom_options: CustomOptionsLike = None,
    ) -> Any:
        """Dispatch a TRACK request. See :meth:`dispatch`."""
        return self.dispatch(Method.TRACK, url, options, custom_options)

    def delete(
        self,
        url: str,
        options: Optional[Mapping[str, Any]] = None,
        custom_options: CustomOptionsLike = None,
    ) -> Any:
        """Dispatch a DELETE request. See :meth:`dispatch`."""
        return self.dispatch(Method.DELETE, url, options, custom_options)

    def options(
        self,
        url: str,
        options: Optional[Mapping[str, Any]] = None,
        custom_options: CustomOptionsLike = None,
    ) -> Any:
        """Dispatch an OPTIONS request. See :meth:`dispatch`."""
        return self.dispatch(Method.OPTIONS, url, options, custom_options)

    def put(
        self,
        url: str,
        options: Optional[Mapping[str, Any]] = None,
        custom_options: CustomOptionsLike = None,
    ) -> Any:
        """Dispatch a PUT request. See :meth:`dispatch`."""
        return self.dispatch(Method.PUT, url, options, custom_options)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _require_transport(self) -> SyncTransport:
        if self._transport is None:
            raise InvalidUsageError(
                "No transport available -- use SyncFetcher as a context manager "
                "or pass transport="
            )
        return self._transport
