"""Typer application and CLI entry point for fetchcache.

``fetchcache request`` runs one or more policy-driven requests in a single
process, so repeated calls show the in-memory cache at work::

    fetchcache request https://httpbin.org/json --preset cache-first-json --repeat 3 --show-store

``fetchcache policies`` lists what each cache policy does.

:func:`main` is the console-script entry point declared in
``pyproject.toml``.
"""

from __future__ import annotations

import json
import signal
import sys
from typing import Any, List, Optional

import httpx
import typer

from fetchcache import __version__
from fetchcache.cache import CacheStore
from fetchcache.client import SyncFetcher
from fetchcache.client.response import display_value
from fetchcache.exceptions import FetchCacheError, InvalidUsageError
from fetchcache.exit_codes import EXIT_GENERIC_FAILURE, EXIT_TRANSPORT_ERROR
from fetchcache.models import CachePolicy, FetchConfig, SuccessDataHandler, coerce_method
from fetchcache.output import (
    OutputFormat,
    OutputManager,
    configure_logging,
    error,
    format_response,
    info,
    print_table,
    set_output,
    success,
)
from fetchcache.presets import PRESETS

app = typer.Typer(
    name="fetchcache",
    help="Send HTTP requests through a policy-driven in-memory response cache.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

POLICY_DESCRIPTIONS: dict[CachePolicy, str] = {
    CachePolicy.CACHE_FIRST: "Serve the cached payload if present; otherwise fetch and cache.",
    CachePolicy.CACHE_ONLY: "Never fetch; serve the cached payload or nothing.",
    CachePolicy.NETWORK_ONLY: "Always fetch; overwrite the cached payload.",
    CachePolicy.NO_CACHE: "Always fetch; never read or write the cache.",
}


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"fetchcache {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress status messages."),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log cache hits, misses and saves."
    ),
) -> None:
    """Install the output manager and logging before any sub-command runs."""
    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    configure_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


# ------------------------------------------------------------------ #
# request
# ------------------------------------------------------------------ #


def _make_fetcher(config: FetchConfig) -> SyncFetcher:
    """Build the fetcher used by ``request``. Patched in tests."""
    return SyncFetcher(config=config)


def _parse_headers(raw_headers: Optional[List[str]]) -> dict[str, str]:
    """Parse repeated ``-H "Name: value"`` flags."""
    headers: dict[str, str] = {}
    for raw in raw_headers or []:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise InvalidUsageError(f'Invalid header "{raw}": expected "Name: value"')
        headers[name.strip()] = value.strip()
    return headers


def _build_request_options(
    headers: Optional[List[str]],
    data: Optional[str],
    json_body: Optional[str],
) -> dict[str, Any]:
    """Translate CLI flags into httpx request keywords."""
    if data is not None and json_body is not None:
        raise InvalidUsageError("--data and --json-body are mutually exclusive")

    options: dict[str, Any] = {}
    parsed_headers = _parse_headers(headers)
    if parsed_headers:
        options["headers"] = parsed_headers
    if data is not None:
        options["content"] = data
    if json_body is not None:
        try:
            options["json"] = json.loads(json_body)
        except ValueError as exc:
            raise InvalidUsageError(f"--json-body is not valid JSON: {exc}") from None
    return options


def _build_custom_options(
    preset: Optional[str],
    policy: Optional[CachePolicy],
    handler: Optional[SuccessDataHandler],
) -> dict[str, Any]:
    """Start from *preset* and let ``--policy`` / ``--handler`` override it."""
    custom: dict[str, Any] = {}
    if preset is not None:
        if preset not in PRESETS:
            choices = ", ".join(sorted(PRESETS))
            raise InvalidUsageError(f'Unknown preset "{preset}". Choose from: {choices}')
        custom.update(PRESETS[preset].model_dump(exclude_none=True))
    if policy is not None:
        custom["cache_policy"] = policy
    if handler is not None:
        custom["success_data_handler"] = handler
    return custom


def _print_store(cache: CacheStore) -> None:
    stats = cache.stats()
    rows = [[name, str(count)] for name, count in stats["methods"].items() if count]
    rows.append(["total", str(stats["total"])])
    print_table(["Method", "Entries"], rows, title="Cache store")


@app.command("request")
def request_command(
    url: str = typer.Argument(..., help="Absolute request URL."),
    method: str = typer.Option("GET", "--method", "-X", help="HTTP method."),
    policy: Optional[CachePolicy] = typer.Option(
        None, "--policy", help="Cache policy for this request."
    ),
    handler: Optional[SuccessDataHandler] = typer.Option(
        None, "--handler", help="How a successful body is parsed before caching."
    ),
    preset: Optional[str] = typer.Option(
        None, "--preset", help="Named option preset (see `fetchcache policies`)."
    ),
    header: Optional[List[str]] = typer.Option(
        None, "--header", "-H", help='Request header as "Name: value". Repeatable.'
    ),
    data: Optional[str] = typer.Option(None, "--data", "-d", help="Raw request body."),
    json_body: Optional[str] = typer.Option(
        None, "--json-body", help="JSON request body."
    ),
    repeat: int = typer.Option(
        1, "--repeat", "-r", min=1, help="Send the request this many times."
    ),
    show_store: bool = typer.Option(
        False, "--show-store", help="Print cache store stats afterwards."
    ),
) -> None:
    """Send a request through the cache, optionally several times.

    Each result goes to stdout. A status line per attempt (network call,
    cache hit, or cache miss) goes to stderr.

    Raises:
        typer.Exit: With the failing error's exit code (2 for bad flags,
            4 for a non-2xx response, 5 for a transport failure).
    """
    from fetchcache.config import resolve_config

    try:
        group = coerce_method(method)
        options = _build_request_options(header, data, json_body)
        custom = _build_custom_options(preset, policy, handler)
        config = resolve_config()

        with _make_fetcher(config) as fetcher:
            for attempt in range(1, repeat + 1):
                result = fetcher.dispatch(group, url, options, custom)
                if isinstance(result, httpx.Response):
                    source = f"network ({result.status_code})"
                elif result is None:
                    source = "cache miss"
                else:
                    source = "cache hit"
                info(f"[{attempt}/{repeat}] {group.value} {url}: {source}")
                format_response(display_value(result))

            if show_store:
                _print_store(fetcher.cache)
    except FetchCacheError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    except httpx.TransportError as exc:
        error(f"Transport error: {exc}")
        raise typer.Exit(code=EXIT_TRANSPORT_ERROR) from None


# ------------------------------------------------------------------ #
# policies
# ------------------------------------------------------------------ #


@app.command("policies")
def policies_command() -> None:
    """List cache policies and the option presets built on them."""
    print_table(
        ["Policy", "Behaviour"],
        [[policy.value, text] for policy, text in POLICY_DESCRIPTIONS.items()],
        title="Cache policies",
    )

    rows = []
    for name, preset in PRESETS.items():
        handler = preset.success_data_handler
        rows.append([
            name,
            preset.cache_policy.value if preset.cache_policy else "-",
            handler.value if handler else "(default)",
        ])
    print_table(["Preset", "Policy", "Handler"], rows, title="Presets")
    success(f"{len(PRESETS)} presets available.")


# ------------------------------------------------------------------ #
# Entry point
# ------------------------------------------------------------------ #


def _setup_signal_handlers() -> None:
    """Exit with 130 on Ctrl-C."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``fetchcache`` console script.

    :class:`~fetchcache.exceptions.FetchCacheError` instances that escape a
    command exit with their ``exit_code``; any other exception exits with
    the generic failure code.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except FetchCacheError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
