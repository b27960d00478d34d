"""Asynchronous policy-driven fetcher.

:class:`AsyncFetcher` is the primary entry point of fetchcache. For every
request it resolves a :class:`~fetchcache.models.CachePolicy`, decides
whether to call the transport or serve the payload held in the
:class:`~fetchcache.cache.CacheStore`, and after a successful network call
saves a parsed copy of the body under (method, URL).

Network paths return the raw :class:`httpx.Response`, still fully readable.
Cache hits return the previously parsed payload, not a response object.

See Also:
    :class:`~fetchcache.client.sync_fetcher.SyncFetcher` for the blocking
    equivalent.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx

from fetchcache.cache import CacheStore
from fetchcache.client.base import CustomOptionsLike, FetcherBase
from fetchcache.client.transport import AsyncTransport, HttpxAsyncTransport
from fetchcache.exceptions import InvalidUsageError
from fetchcache.models import FetchConfig, Method, coerce_method

logger = logging.getLogger(__name__)


class AsyncFetcher(FetcherBase):
    """Non-blocking fetcher that caches responses according to per-request policy.

    Use it as an async context manager to have it create (and later close)
    an :class:`httpx.AsyncClient` configured from *config*. Pass *transport*
    to supply your own network layer instead. An injected transport works
    with or without the context manager and is never closed by the fetcher.

    Args:
        cache: Store to use. Defaults to the process-wide store.
        config: Default policy, default parse handler, and httpx settings.
        transport: Optional callable ``(url, options) -> Awaitable[Response]``.

    Example::

        async with AsyncFetcher() as fetcher:
            response = await fetcher.get(
                "https://api.example.com/users",
                custom_options={"cachePolicy": "cache-first", "successDataHandler": "json"},
            )
            users = response.json()
            # Served from the store this time: the parsed JSON, not a Response.
            users = await fetcher.get(
                "https://api.example.com/users",
                custom_options={"cachePolicy": "cache-first"},
            )
    """

    def __init__(
        self,
        cache: Optional[CacheStore] = None,
        config: Optional[FetchConfig] = None,
        transport: Optional[AsyncTransport] = None,
    ) -> None:
        super().__init__(cache=cache, config=config)
        self._transport: Optional[AsyncTransport] = transport
        self._client: Optional[httpx.AsyncClient] = None

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> AsyncFetcher:
        if self._transport is None:
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout,
                verify=self._config.verify_ssl,
                follow_redirects=self._config.follow_redirects,
            )
            self._transport = HttpxAsyncTransport(self._client)
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            self._transport = None

    # ------------------------------------------------------------------ #
    # Dispatch
    # ------------------------------------------------------------------ #

    async def dispatch(
        self,
        method: Method | str,
        url: str,
        options: Optional[Mapping[str, Any]] = None,
        custom_options: CustomOptionsLike = None,
    ) -> Any:
        """Send or serve a request according to its cache policy.

        Args:
            method: HTTP method, as a :class:`~fetchcache.models.Method` or a
                case-insensitive name.
            url: Absolute request URL. Also the cache key.
            options: httpx request keywords (``headers``, ``params``,
                ``json``, ``content``, ``data``, ...). Any ``method`` key is
                replaced by *method*.
            custom_options: Per-request ``cache_policy`` and
                ``success_data_handler``.

        Returns:
            The raw :class:`httpx.Response` when the network was called, or
            the cached payload otherwise (``None`` on a ``cache-only``
            miss).

        Raises:
            NetworkFailure: If the response status is not 2xx.
            InvalidUsageError: For an unknown method, invalid custom
                options, or no transport available.
            httpx.TransportError: Propagated unchanged from the default
                transport (a custom transport's errors propagate likewise).
        """
        group = coerce_method(method)
        policy, handler = self.resolve_options(custom_options)

        if not self.should_call_network(policy, group, url):
            return self.read_cached(policy, group, url)

        transport = self._require_transport()
        logger.debug("Network request (%s): %s %s", policy.value, group.value, url)
        response = await transport(url, self.merge_options(options, group))
        await response.aread()

        self.raise_for_failure(response)
        self.store_response(policy, group, url, response, handler)
        return response

    async def get(
        self,
        url: str,
        options: Optional[Mapping[str, Any]] = None,
        custom_options: CustomOptionsLike = None,
    ) -> Any:
        """Dispatch a GET request. See :meth:`dispatch`."""
        return await self.dispatch(Method.GET, url, options, custom_options)

    async def head(
        self,
        url: str,
        options: Optional[Mapping[str, Any]] = None,
        custom_options: CustomOptionsLike = None,
    ) -> Any:
        """Dispatch a HEAD request. See :meth:`dispatch`."""
        return await self.dispatch(Method.HEAD, url, options, custom_options)

    async def post(
        self,
        url: str,
        options: Optional[Mapping[str, Any]] = None,
        custom_options: CustomOptionsLike = None,
    ) -> Any:
        """Dispatch a POST request. See :meth:`dispatch`."""
        return await self.dispatch(Method.POST, url, options, custom_options)

    async def connect(
        self,
        url: str,
        options: Optional[Mapping[str, Any]] = None,
        custom_options: CustomOptionsLike = None,
    ) -> Any:
        """Dispatch a CONNECT request. See :meth:`dispatch`."""
        return await self.dispatch(Method.CONNECT, url, options, custom_options)

    async def trace(
        self,
        url: str,
        options: Optional[Mapping[str, Any]] = None,
        custom_options: CustomOptionsLike = None,
    ) -> Any:
        """Dispatch a TRACE request. See :meth:`dispatch`."""
        return await self.dispatch(Method.TRACE, url, options, custom_options)

    async def track(
        self,
        url: str,
        options: Optional[Mapping[str, Any]] = None,
        custom_options: CustomOptionsLike = None,
    ) -> Any:
        """Dispatch a TRACK request. See :meth:`dispatch`."""
        return await self.dispatch(Method.TRACK, url, options, custom_options)

    async def delete(
        self,
        url: str,
        options: Optional[Mapping[str, Any]] = None,
        custom_options: CustomOptionsLike = None,
    ) -> Any:
        """Dispatch a DELETE request. See :meth:`dispatch`."""
        return await self.dispatch(Method.DELETE, url, options, custom_options)

    async def options(
        self,
        url: str,
        options: Optional[Mapping[str, Any]] = None,
        custom_options: CustomOptionsLike = None,
    ) -> Any:
        """Dispatch an OPTIONS request. See :meth:`dispatch`."""
        return await self.dispatch(Method.OPTIONS, url, options, custom_options)

    async def put(
        self,
        url: str,
        options: Optional[Mapping[str, Any]] = None,
        custom_options: CustomOptionsLike = None,
    ) -> Any:
        """Dispatch a PUT request. See :meth:`dispatch`."""
        return await self.dispatch(Method.PUT, url, options, custom_options)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _require_transport(self) -> AsyncTransport:
        if self._transport is None:
            raise InvalidUsageError(
                "No transport available -- use AsyncFetcher as an async context "
                "manager or pass transport="
            )
        return self._transport
