"""Exception hierarchy for fetchcache.

All library errors inherit from :class:`FetchCacheError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`fetchcache.exit_codes`. The CLI entry point in :func:`fetchcache.app.main`
catches ``FetchCacheError`` and exits with the matching code.

Subclass hierarchy::

    FetchCacheError            (exit 1)
    +-- InvalidUsageError      (exit 2)
    +-- AlreadyInitializedError (exit 3)
    +-- NetworkFailure         (exit 4)
    +-- ConfigError            (exit 1)

Transport-level failures are not wrapped: whatever the transport raises
reaches the caller unchanged. :data:`TransportError` re-exports
:class:`httpx.TransportError` so callers can catch the default transport's
errors without importing httpx themselves.
"""

from __future__ import annotations

import httpx

from fetchcache.exit_codes import (
    EXIT_CACHE_STATE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NETWORK_FAILURE,
)


class FetchCacheError(Exception):
    """Base exception for all fetchcache errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(FetchCacheError):
    """Raised for unknown HTTP methods or a fetcher used without a transport."""

    exit_code = EXIT_INVALID_USAGE


class AlreadyInitializedError(FetchCacheError):
    """Raised when :meth:`~fetchcache.cache.CacheStore.initialize` runs on a live store.

    Re-initialising would silently drop every captured entry. Use
    :meth:`~fetchcache.cache.CacheStore.reset` to clear the store instead.
    """

    exit_code = EXIT_CACHE_STATE_ERROR


class NetworkFailure(FetchCacheError):
    """Raised when the transport returns a response with a non-2xx status.

    The failed response is kept untouched on :attr:`response` so the caller
    can inspect headers or read the error body. It is never cached.

    Args:
        response: The raw failed response.
    """

    exit_code = EXIT_NETWORK_FAILURE

    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        try:
            request = response.request
            target = f" for {request.method} {request.url}"
        except RuntimeError:
            # Response built without a request (e.g. by a custom transport).
            target = ""
        super().__init__(f"HTTP {response.status_code} {response.reason_phrase}{target}")

    @property
    def status_code(self) -> int:
        """Status code of the failed response."""
        return self.response.status_code


class ConfigError(FetchCacheError):
    """Raised for an unreadable config file or an invalid configuration value."""

    exit_code = EXIT_GENERIC_FAILURE


TransportError = httpx.TransportError
"""Alias of :class:`httpx.TransportError`, raised by the default transports."""
