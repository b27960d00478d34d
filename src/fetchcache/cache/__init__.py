"""In-memory response payload caching for fetchcache.

This package provides :class:`CacheStore`, the method- and URL-keyed store
that the fetchers in :mod:`fetchcache.client` read from and write to, plus
:func:`get_cache`, the accessor for the single store shared across a
process.
"""

from fetchcache.cache.store import CacheStore, discard_cache, get_cache

__all__ = ["CacheStore", "get_cache", "discard_cache"]
