"""Network transports consumed by the fetchers.

A transport is any callable taking ``(url, options)`` and returning an
:class:`httpx.Response` (awaitable for the async variant). ``options`` is a
plain dict of httpx request keywords (``headers``, ``params``, ``json``,
``content``, ``data``, ``cookies``, ``timeout``) plus the ``method`` key the
dispatcher injects.

The default transports adapt an :class:`httpx.AsyncClient` or
:class:`httpx.Client`. Errors raised by httpx (``httpx.ConnectError``,
``httpx.TimeoutException``, ...) are not caught here; they reach the
fetcher's caller unchanged.
"""

from __future__ import annotations

from typing import Any, Awaitable, Protocol

import httpx


class AsyncTransport(Protocol):
    """Callable contract for non-blocking transports."""

    def __call__(self, url: str, options: dict[str, Any]) -> Awaitable[httpx.Response]: ...


class SyncTransport(Protocol):
    """Callable contract for blocking transports."""

    def __call__(self, url: str, options: dict[str, Any]) -> httpx.Response: ...


def _split_method(options: dict[str, Any]) -> tuple[str, dict[str, Any]]:
    request_kwargs = dict(options)
    method = request_kwargs.pop("method", "GET")
    return str(method), request_kwargs


class HttpxAsyncTransport:
    """Adapts an :class:`httpx.AsyncClient` to the :class:`AsyncTransport` contract.

    Args:
        client: The client used to send requests. The transport never
            closes it; its owner does.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def __call__(self, url: str, options: dict[str, Any]) -> httpx.Response:
        method, request_kwargs = _split_method(options)
        return await self._client.request(method, url, **request_kwargs)


class HttpxSyncTransport:
    """Adapts an :class:`httpx.Client` to the :class:`SyncTransport` contract.

    Args:
        client: The client used to send requests. The transport never
            closes it; its owner does.
    """

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    def __call__(self, url: str, options: dict[str, Any]) -> httpx.Response:
        method, request_kwargs = _split_method(options)
        return self._client.request(method, url, **request_kwargs)
