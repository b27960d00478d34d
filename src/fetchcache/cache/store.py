"""In-memory store of captured response payloads, keyed by method and URL.

The store holds one bucket per :class:`~fetchcache.models.Method`. Each
bucket maps a URL string to whatever the request's parse handler produced
(text, a decoded JSON value, bytes, or a :class:`~fetchcache.models.Blob`).
Entries never expire and cannot be evicted one by one: they live until
:meth:`CacheStore.reset` wipes the whole store. Nothing is written to disk,
so the cache does not survive a process restart.

Existence follows truthiness. An entry whose payload is empty (``""``,
``b""``, ``[]``, ``{}``, ``0``, ``None`` ...) is reported as absent by
:meth:`CacheStore.exists` and read back as ``None`` by
:meth:`CacheStore.read`, so an empty response is fetched again under
``cache-first``.

Most code should go through :func:`get_cache`, which lazily creates the one
store shared by every fetcher in the process.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fetchcache.exceptions import AlreadyInitializedError
from fetchcache.models import Method, coerce_method

logger = logging.getLogger(__name__)


class CacheStore:
    """Method-bucketed mapping of URL to parsed response payload.

    The constructor initialises the empty buckets. Calling
    :meth:`initialize` again on the same instance raises
    :class:`~fetchcache.exceptions.AlreadyInitializedError`; clear the
    store with :meth:`reset` instead.

    Example::

        from fetchcache.cache import CacheStore

        store = CacheStore()
        store.save("GET", "https://api.example.com/users", [{"id": 1}])
        store.exists("GET", "https://api.example.com/users")   # True
        store.read("GET", "https://api.example.com/users")     # [{"id": 1}]
        store.reset()
    """

    def __init__(self) -> None:
        self._buckets: Optional[dict[Method, dict[str, Any]]] = None
        self.initialize()

    def initialize(self) -> None:
        """Create the empty per-method buckets.

        Raises:
            AlreadyInitializedError: If the store has already been
                initialised.
        """
        if self._buckets is not None:
            raise AlreadyInitializedError(
                "A cache store can not be initialised more than once. "
                "Use reset() to clear it."
            )
        self._buckets = self._empty_buckets()

    def reset(self) -> None:
        """Discard every entry and recreate the empty buckets."""
        dropped = len(self)
        self._buckets = self._empty_buckets()
        logger.debug("Cache reset, %d entries dropped", dropped)

    def save(self, method: Method | str, key: str, value: Any) -> None:
        """Insert or overwrite the entry for (*method*, *key*). Last write wins."""
        group = coerce_method(method)
        self._bucket(group)[key] = value
        logger.debug("Cache save: %s %s", group.value, key)

    def exists(self, method: Method | str, key: str) -> bool:
        """Return ``True`` if (*method*, *key*) holds a non-empty payload."""
        return bool(self._bucket(coerce_method(method)).get(key))

    def read(self, method: Method | str, key: str) -> Any:
        """Return the payload for (*method*, *key*), or ``None`` if absent or empty."""
        value = self._bucket(coerce_method(method)).get(key)
        return value if value else None

    def snapshot(self) -> dict[Method, dict[str, Any]]:
        """Return a copy of the whole store for inspection.

        The outer and per-method dicts are fresh copies, so mutating them
        does not change the store. Payload objects themselves are shared.
        """
        assert self._buckets is not None
        return {method: dict(bucket) for method, bucket in self._buckets.items()}

    def stats(self) -> dict[str, Any]:
        """Return entry counts.

        Returns:
            A ``dict`` with ``total`` (int) and ``methods``, a mapping of
            method name to the number of entries in its bucket.
        """
        assert self._buckets is not None
        methods = {method.value: len(bucket) for method, bucket in self._buckets.items()}
        return {"total": sum(methods.values()), "methods": methods}

    def __len__(self) -> int:
        if self._buckets is None:
            return 0
        return sum(len(bucket) for bucket in self._buckets.values())

    def _bucket(self, method: Method) -> dict[str, Any]:
        assert self._buckets is not None
        return self._buckets[method]

    @staticmethod
    def _empty_buckets() -> dict[Method, dict[str, Any]]:
        return {method: {} for method in Method}


# ------------------------------------------------------------------ #
# Process-wide instance
# ------------------------------------------------------------------ #

_cache: Optional[CacheStore] = None


def get_cache() -> CacheStore:
    """Return the process-wide :class:`CacheStore`, creating it on first use.

    Every fetcher constructed without an explicit store shares this
    instance.

    Returns:
        The active :class:`CacheStore`.
    """
    global _cache
    if _cache is None:
        _cache = CacheStore()
    return _cache


def discard_cache() -> None:
    """Forget the process-wide store so the next :func:`get_cache` builds a new one.

    Primarily useful in test suites. Fetchers that already hold the old
    store keep using it.
    """
    global _cache
    _cache = None
