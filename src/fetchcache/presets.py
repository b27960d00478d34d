"""Ready-made :class:`~fetchcache.models.FetchCustomOptions` for common cases.

Pass any of these as ``custom_options``::

    from fetchcache.presets import CACHE_FIRST_JSON

    users = await fetcher.get(url, custom_options=CACHE_FIRST_JSON)

:data:`PRESETS` maps the kebab-case names accepted by the CLI's ``--preset``
flag to the same objects.
"""

from __future__ import annotations

from fetchcache.models import CachePolicy, FetchCustomOptions, SuccessDataHandler

CACHE_FIRST_TEXT = FetchCustomOptions(
    cache_policy=CachePolicy.CACHE_FIRST,
    success_data_handler=SuccessDataHandler.TEXT,
)
"""Serve from cache when possible; cache bodies as text."""

CACHE_FIRST_JSON = FetchCustomOptions(
    cache_policy=CachePolicy.CACHE_FIRST,
    success_data_handler=SuccessDataHandler.JSON,
)
"""Serve from cache when possible; cache bodies as decoded JSON."""

CACHE_ONLY = FetchCustomOptions(cache_policy=CachePolicy.CACHE_ONLY)
"""Only ever read the cache."""

NETWORK_ONLY_TEXT = FetchCustomOptions(
    cache_policy=CachePolicy.NETWORK_ONLY,
    success_data_handler=SuccessDataHandler.TEXT,
)
"""Always fetch; refresh the cached text."""

NETWORK_ONLY_JSON = FetchCustomOptions(
    cache_policy=CachePolicy.NETWORK_ONLY,
    success_data_handler=SuccessDataHandler.JSON,
)
"""Always fetch; refresh the cached JSON."""

NO_CACHE = FetchCustomOptions(cache_policy=CachePolicy.NO_CACHE)
"""Always fetch and leave the cache alone."""

PRESETS: dict[str, FetchCustomOptions] = {
    "cache-first-text": CACHE_FIRST_TEXT,
    "cache-first-json": CACHE_FIRST_JSON,
    "cache-only": CACHE_ONLY,
    "network-only-text": NETWORK_ONLY_TEXT,
    "network-only-json": NETWORK_ONLY_JSON,
    "no-cache": NO_CACHE,
}
