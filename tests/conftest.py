"""Shared test fixtures for fetchcache.

Provides isolation of the two process-wide singletons (cache store and
output manager), a config-isolated working directory, mock transports, and
a Typer CLI runner. Discovered automatically by pytest.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from fetchcache.cache import CacheStore, discard_cache
from fetchcache.config import ENV_VARS
from fetchcache.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_globals_between_tests() -> None:
    """Drop the process-wide cache store and output manager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams the
    cached references go stale, so a fresh manager is forced on next use.
    The root logger is restored for the same reason, since the CLI callback
    installs a RichHandler bound to the redirected stderr.
    """
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    discard_cache()
    reset_output()
    root.handlers[:] = handlers
    root.setLevel(level)


# ---------------------------------------------------------------------------
# Cache fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def store() -> CacheStore:
    """A private store, independent of the process-wide one."""
    return CacheStore()


# ---------------------------------------------------------------------------
# Transport fixtures
# ---------------------------------------------------------------------------


class RecordingHandler:
    """``httpx.MockTransport`` handler that records requests.

    Every call builds a fresh :class:`httpx.Response` from *status_code* and
    *response_kwargs* (``json=``, ``text=``, ``content=``, ``headers=``).
    """

    def __init__(self, status_code: int = 200, **response_kwargs: Any) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = status_code
        self._response_kwargs = response_kwargs or {"text": "ok"}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, **self._response_kwargs)

    @property
    def calls(self) -> int:
        return len(self.requests)


@pytest.fixture
def make_handler() -> Callable[..., RecordingHandler]:
    """Factory for :class:`RecordingHandler` instances."""
    return RecordingHandler


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty directory with no FETCHCACHE_* variables set.

    Returns:
        The tmp_path root, for writing a ``fetchcache.json``.
    """
    for var in [*ENV_VARS, "FETCHCACHE_CONFIG"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def write_project_config(isolated_config: Path) -> Callable[[Any], Path]:
    """Write ``fetchcache.json`` in the isolated working directory."""

    def _write(data: Any) -> Path:
        path = isolated_config / "fetchcache.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
