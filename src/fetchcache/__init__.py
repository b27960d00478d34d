"""fetchcache -- a policy-driven in-memory response cache in front of httpx.

Every request carries a cache policy that decides whether it goes to the
network, is served from the shared :class:`~fetchcache.cache.CacheStore`, or
both. Successful responses are parsed (text, JSON, bytes, or a blob) and
stored under (method, URL) while the caller gets the untouched
:class:`httpx.Response` back.

Typical use::

    from fetchcache import AsyncFetcher
    from fetchcache.presets import CACHE_FIRST_JSON

    async with AsyncFetcher() as fetcher:
        await fetcher.get("https://api.example.com/users", custom_options=CACHE_FIRST_JSON)

Modules:
    app: Typer CLI (``fetchcache request``, ``fetchcache policies``).
    cache: The keyed cache store and its process-wide accessor.
    client: :class:`AsyncFetcher` and :class:`SyncFetcher`.
    config: Layered resolution of :class:`~fetchcache.models.FetchConfig`.
    exceptions: Exception hierarchy with exit-code mapping.
    models: Enumerations and Pydantic models.
    output: stdout/stderr formatting and logging setup for the CLI.
    presets: Ready-made per-request cache options.
"""

__version__ = "0.1.0"

from fetchcache.cache import CacheStore, discard_cache, get_cache  # noqa: E402
from fetchcache.client import AsyncFetcher, SyncFetcher  # noqa: E402
from fetchcache.models import (  # noqa: E402
    CachePolicy,
    FetchConfig,
    FetchCustomOptions,
    Method,
    SuccessDataHandler,
)

__all__ = [
    "__version__",
    "AsyncFetcher",
    "SyncFetcher",
    "CacheStore",
    "get_cache",
    "discard_cache",
    "CachePolicy",
    "FetchConfig",
    "FetchCustomOptions",
    "Method",
    "SuccessDataHandler",
]
