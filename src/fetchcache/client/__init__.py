"""Policy-driven fetchers for fetchcache.

Provides asynchronous and synchronous fetchers that sit in front of an
:mod:`httpx` transport and decide, per request, whether to hit the network or
serve a payload from the shared :class:`~fetchcache.cache.CacheStore`.

Classes:
    :class:`AsyncFetcher` -- non-blocking fetcher backed by :class:`httpx.AsyncClient`.
    :class:`SyncFetcher` -- blocking fetcher backed by :class:`httpx.Client`.

Both expose ``get``, ``head``, ``post``, ``connect``, ``trace``, ``track``,
``delete``, ``options``, and ``put``, each taking
``(url, options=None, custom_options=None)``.

Example::

    from fetchcache.client import AsyncFetcher
    from fetchcache.presets import CACHE_FIRST_JSON

    async with AsyncFetcher() as fetcher:
        resp = await fetcher.get("https://api.example.com/users", custom_options=CACHE_FIRST_JSON)
"""

from fetchcache.client.async_fetcher import AsyncFetcher
from fetchcache.client.sync_fetcher import SyncFetcher
from fetchcache.client.transport import (
    AsyncTransport,
    HttpxAsyncTransport,
    HttpxSyncTransport,
    SyncTransport,
)

__all__ = [
    "AsyncFetcher",
    "SyncFetcher",
    "AsyncTransport",
    "SyncTransport",
    "HttpxAsyncTransport",
    "HttpxSyncTransport",
]
