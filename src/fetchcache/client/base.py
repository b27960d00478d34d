"""Cache-policy decisions shared by :class:`AsyncFetcher` and :class:`SyncFetcher`.

Everything here is synchronous and free of I/O: resolving the effective
policy and parse handler, deciding whether a request must hit the network,
merging the method into transport options, rejecting failed responses, and
writing a parsed clone of a successful response into the store. The two
fetchers only differ in how they call the transport and buffer the body.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

import httpx
from pydantic import ValidationError

from fetchcache.cache import CacheStore, get_cache
from fetchcache.client.response import clone_response, parse_body
from fetchcache.exceptions import InvalidUsageError, NetworkFailure
from fetchcache.models import (
    CachePolicy,
    FetchConfig,
    FetchCustomOptions,
    Method,
    SuccessDataHandler,
)

logger = logging.getLogger(__name__)

CustomOptionsLike = Union[FetchCustomOptions, Mapping[str, Any], None]
"""What callers may pass as ``custom_options``: a model, a plain mapping, or ``None``."""

_NETWORK_POLICIES = frozenset({CachePolicy.NETWORK_ONLY, CachePolicy.NO_CACHE})


class FetcherBase:
    """State and policy logic common to both fetchers.

    Args:
        cache: Store to read from and write to. Defaults to the
            process-wide store from :func:`~fetchcache.cache.get_cache`.
        config: Default policy, default parse handler, and httpx client
            settings. Defaults to :class:`~fetchcache.models.FetchConfig`.
    """

    def __init__(
        self,
        cache: Optional[CacheStore] = None,
        config: Optional[FetchConfig] = None,
    ) -> None:
        self._cache = cache if cache is not None else get_cache()
        self._config = config if config is not None else FetchConfig()

    @property
    def cache(self) -> CacheStore:
        """The store this fetcher reads from and writes to."""
        return self._cache

    @property
    def config(self) -> FetchConfig:
        """The fetcher's defaults."""
        return self._config

    # ------------------------------------------------------------------ #
    # Policy resolution
    # ------------------------------------------------------------------ #

    def resolve_options(
        self, custom_options: CustomOptionsLike
    ) -> tuple[CachePolicy, SuccessDataHandler]:
        """Return the effective ``(cache_policy, success_data_handler)`` pair.

        Values set on *custom_options* win; unset ones fall back to
        :attr:`config`.

        Raises:
            InvalidUsageError: If *custom_options* is a mapping that does not
                validate (e.g. an unknown policy name).
        """
        options = _coerce_custom_options(custom_options)
        policy = options.cache_policy or self._config.default_cache_policy
        handler = options.success_data_handler or self._config.default_success_data_handler
        return policy, handler

    def should_call_network(self, policy: CachePolicy, method: Method, url: str) -> bool:
        """Decide whether a request under *policy* must go to the network.

        ``network-only`` and ``no-cache`` always do. ``cache-first`` does only
        when the store has no entry for (*method*, *url*). ``cache-only``
        never does.
        """
        if policy in _NETWORK_POLICIES:
            return True
        if policy is CachePolicy.CACHE_FIRST:
            return not self._cache.exists(method, url)
        return False

    @staticmethod
    def merge_options(options: Optional[Mapping[str, Any]], method: Method) -> dict[str, Any]:
        """Copy *options* and inject *method*, overriding any ``method`` key."""
        return {**(options or {}), "method": method.value}

    # ------------------------------------------------------------------ #
    # Response handling
    # ------------------------------------------------------------------ #

    def read_cached(self, policy: CachePolicy, method: Method, url: str) -> Any:
        """Serve a request from the store without touching the network."""
        value = self._cache.read(method, url)
        if value is None:
            logger.debug("Cache miss (%s): %s %s", policy.value, method.value, url)
        else:
            logger.debug("Cache hit (%s): %s %s", policy.value, method.value, url)
        return value

    @staticmethod
    def raise_for_failure(response: httpx.Response) -> None:
        """Raise :class:`~fetchcache.exceptions.NetworkFailure` for a non-2xx *response*."""
        if not response.is_success:
            raise NetworkFailure(response)

    def store_response(
        self,
        policy: CachePolicy,
        method: Method,
        url: str,
        response: httpx.Response,
        handler: SuccessDataHandler,
    ) -> None:
        """Parse a clone of a successful *response* and save it, unless *policy* is ``no-cache``.

        The body of *response* must already be buffered. *response* itself is
        left unconsumed. A body that does not parse with *handler* (an empty
        204 under ``json``, say) is logged and not cached; the caller still
        gets *response*.
        """
        if policy is CachePolicy.NO_CACHE:
            return

        clone = clone_response(response)
        try:
            payload = parse_body(clone, handler)
        except ValueError as exc:
            logger.warning(
                "Not caching %s %s: HTTP %d body does not parse as %s (%s)",
                method.value, url, response.status_code, handler.value, exc,
            )
            return

        self._cache.save(method, url, payload)


def _coerce_custom_options(custom_options: CustomOptionsLike) -> FetchCustomOptions:
    if custom_options is None:
        return FetchCustomOptions()
    if isinstance(custom_options, FetchCustomOptions):
        return custom_options
    try:
        return FetchCustomOptions.model_validate(dict(custom_options))
    except ValidationError as exc:
        raise InvalidUsageError(f"Invalid custom options: {exc}") from exc
