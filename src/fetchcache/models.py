"""Canonical enumerations and Pydantic models shared across fetchcache.

Every other module imports its data shapes from here:

**Enumerations** -- :class:`Method`, :class:`CachePolicy`, and
:class:`SuccessDataHandler`. All are ``str`` enums so plain strings such as
``"GET"`` or ``"cache-first"`` compare equal to their members and can key the
same dict entries.

**Models** -- :class:`FetchCustomOptions` (per-request cache directives),
:class:`FetchConfig` (dispatcher-wide defaults and transport settings) and
:class:`Blob` (payload produced by the ``blob`` parse handler).
"""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from fetchcache.exceptions import InvalidUsageError


class Method(str, enum.Enum):
    """HTTP methods the cache store keeps a bucket for.

    ``TRACK`` is not a standard verb, but some servers accept it and the
    dispatcher exposes an entry point for it like every other method.
    """

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    CONNECT = "CONNECT"
    TRACE = "TRACE"
    TRACK = "TRACK"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    PUT = "PUT"


def coerce_method(method: Method | str) -> Method:
    """Normalise *method* to a :class:`Method` member, ignoring case.

    Raises:
        InvalidUsageError: If *method* names no supported HTTP method.
    """
    if isinstance(method, Method):
        return method
    try:
        return Method(method.upper())
    except (ValueError, AttributeError) as exc:
        supported = ", ".join(m.value for m in Method)
        raise InvalidUsageError(
            f"Unsupported HTTP method {method!r}; expected one of: {supported}"
        ) from exc


class CachePolicy(str, enum.Enum):
    """Per-request directive deciding where to look first and whether to store.

    * ``CACHE_FIRST`` -- return the cached entry if present, otherwise fetch
      and store the result.
    * ``CACHE_ONLY`` -- return the cached entry; never touch the network.
    * ``NETWORK_ONLY`` -- always fetch and always store the result.
    * ``NO_CACHE`` -- always fetch and never store the result.
    """

    CACHE_FIRST = "cache-first"
    CACHE_ONLY = "cache-only"
    NETWORK_ONLY = "network-only"
    NO_CACHE = "no-cache"


class SuccessDataHandler(str, enum.Enum):
    """How a successful response body is parsed before it is cached.

    The values keep the names of the browser ``Response`` body readers so
    config files and presets written for other fetch-with-cache clients
    carry over unchanged.
    """

    TEXT = "text"
    JSON = "json"
    ARRAY_BUFFER = "arrayBuffer"
    BLOB = "blob"


class Blob(BaseModel):
    """Raw response bytes tagged with their content type.

    Produced by the :attr:`SuccessDataHandler.BLOB` handler. An empty blob
    has length zero and is therefore falsy, like an empty ``bytes`` value.
    """

    model_config = ConfigDict(frozen=True)

    data: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        """Number of bytes held."""
        return len(self.data)

    def __len__(self) -> int:
        return len(self.data)


class FetchCustomOptions(BaseModel):
    """Cache directives attached to a single request.

    Both fields are optional; anything left unset falls back to the
    dispatcher's :class:`FetchConfig` defaults. The camelCase keys used by
    other fetch-with-cache clients are accepted as aliases::

        FetchCustomOptions.model_validate(
            {"cachePolicy": "cache-first", "successDataHandler": "json"}
        )
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    cache_policy: Optional[CachePolicy] = Field(default=None, alias="cachePolicy")
    success_data_handler: Optional[SuccessDataHandler] = Field(
        default=None, alias="successDataHandler"
    )


class FetchConfig(BaseModel):
    """Defaults owned by a dispatcher instance.

    The policy and handler defaults apply whenever a request does not name
    its own. The remaining fields are handed to the httpx client that a
    fetcher creates when no transport is injected.

    See Also:
        :func:`fetchcache.config.resolve_config` -- builds a config from
        overrides, environment variables, and ``fetchcache.json``.
    """

    model_config = ConfigDict(extra="forbid")

    default_cache_policy: CachePolicy = Field(
        default=CachePolicy.NETWORK_ONLY, description="Policy used when a request sets none"
    )
    default_success_data_handler: SuccessDataHandler = Field(
        default=SuccessDataHandler.TEXT, description="Parse handler used when a request sets none"
    )
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")
    follow_redirects: bool = Field(default=True, description="Follow HTTP redirects")
