"""Response body duplication and parse handlers.

The dispatcher caches a *parsed* copy of each successful response while
handing the original :class:`httpx.Response` back to the caller. To keep the
caller's body readable, the body is buffered once and the cached payload is
parsed from an independent clone built over those bytes
(:func:`clone_response`), never from the original object.

:func:`parse_body` implements the four
:class:`~fetchcache.models.SuccessDataHandler` strategies, and
:func:`extract_response_data` / :func:`display_value` turn either a raw
response or a cached payload into something the CLI can print.
"""

from __future__ import annotations

from typing import Any

import httpx

from fetchcache.models import Blob, SuccessDataHandler

_DEFAULT_BLOB_TYPE = "application/octet-stream"

# Headers describing the wire encoding of the original body. The clone is
# built from already-decoded bytes, so keeping them would decode twice.
_WIRE_HEADERS = ("content-encoding", "transfer-encoding", "content-length")


def clone_response(response: httpx.Response) -> httpx.Response:
    """Return an independent copy of a buffered *response*.

    The clone carries the same status, headers, request, and body bytes.
    Reading or closing it has no effect on *response*.

    Args:
        response: A response whose body has already been read (``read()`` /
            ``aread()``).

    Returns:
        A new :class:`httpx.Response`.

    Raises:
        httpx.ResponseNotRead: If the body of *response* was never read.
    """
    content = response.content
    headers = httpx.Headers(response.headers)
    for name in _WIRE_HEADERS:
        if name in headers:
            del headers[name]

    try:
        request = response.request
    except RuntimeError:
        request = None

    return httpx.Response(
        status_code=response.status_code,
        headers=headers,
        content=content,
        request=request,
        extensions=dict(response.extensions),
        default_encoding=response.default_encoding,
    )


def parse_body(response: httpx.Response, handler: SuccessDataHandler | str) -> Any:
    """Parse the body of *response* with the selected handler.

    * ``text`` -- the decoded body as ``str``.
    * ``json`` -- the JSON-decoded value (``dict``, ``list``, ...).
    * ``arrayBuffer`` -- the raw body as ``bytes``.
    * ``blob`` -- a :class:`~fetchcache.models.Blob` with the body and its
      ``Content-Type``.

    Raises:
        ValueError: If *handler* is not a known handler name, or the
            ``json`` handler meets a body that is not valid JSON
            (:class:`json.JSONDecodeError` is a ``ValueError``).
    """
    handler = SuccessDataHandler(handler)

    if handler is SuccessDataHandler.JSON:
        return response.json()
    if handler is SuccessDataHandler.ARRAY_BUFFER:
        return bytes(response.content)
    if handler is SuccessDataHandler.BLOB:
        return Blob(
            data=response.content,
            content_type=response.headers.get("content-type", _DEFAULT_BLOB_TYPE),
        )
    return response.text


def extract_response_data(response: httpx.Response) -> Any:
    """Extract a printable body from a raw response.

    Tries JSON first and falls back to text. Returns ``None`` for an empty
    body.
    """
    if not response.content:
        return None

    try:
        return response.json()
    except ValueError:
        return response.text


def display_value(value: Any) -> Any:
    """Turn a dispatch result into data the output layer can render.

    Raw responses go through :func:`extract_response_data`; binary payloads
    are summarised rather than dumped. Everything else is returned as-is.
    """
    if isinstance(value, httpx.Response):
        return extract_response_data(value)
    if isinstance(value, Blob):
        return {"blob": {"content_type": value.content_type, "size": value.size}}
    if isinstance(value, (bytes, bytearray)):
        return {"bytes": len(value)}
    return value
