"""Terminal output for the ``fetchcache`` CLI.

Data (response bodies, cached payloads, tables) goes to **stdout**;
everything else (hit/miss status, warnings, errors, log records) goes to
**stderr**, so ``fetchcache request ... | jq`` sees only the payload.

:func:`configure_logging` routes the library's :mod:`logging` records
through a :class:`rich.logging.RichHandler`. Library modules never
configure logging themselves.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """How data written to stdout is rendered.

    ``AUTO`` becomes ``RICH`` on an interactive, colour-capable terminal and
    ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Routes data to stdout and diagnostics to stderr in the active format.

    Args:
        format: Requested format; ``AUTO`` is resolved at construction.
        no_color: Disable colour and Rich markup. Also implied by
            ``NO_COLOR`` or ``TERM=dumb``.
        quiet: Drop informational diagnostics (warnings and errors still
            print).
        verbose: Show :meth:`debug` messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _color_disabled_by_env()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            interactive = _is_tty() and not self._no_color
            format = OutputFormat.RICH if interactive else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    @property
    def stderr_console(self) -> Console:
        """Console bound to stderr, shared with the logging handler."""
        return self._stderr

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def format_response(self, data: Any) -> None:
        """Render a response body or cached payload to stdout.

        Args:
            data: A JSON-compatible value (``dict``, ``list``, scalar) or a
                string. ``None`` prints ``null`` in JSON mode and nothing
                otherwise.
        """
        if self._format == OutputFormat.JSON:
            self.print_data(_dump(data))
        elif data is None:
            return
        elif self._format == OutputFormat.PLAIN:
            self._print_plain(data)
        else:
            self._print_rich(data)

    def print_data(self, text: str) -> None:
        """Write *text* to stdout followed by a newline."""
        print(text, file=sys.stdout, flush=True)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows as a Rich table, a JSON array of objects, or TSV.

        Args:
            headers: Column names.
            rows: Cell strings, one list per row.
            title: Table title (Rich mode only).
        """
        if self._format == OutputFormat.JSON:
            self.print_data(_dump([dict(zip(headers, row)) for row in rows]))
            return

        if self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
            return

        table = Table(title=title, show_header=True, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Informational line; hidden by ``--quiet``."""
        if not self._quiet:
            self._diagnostic(message)

    def success(self, message: str) -> None:
        """Green status line; hidden by ``--quiet``."""
        if not self._quiet:
            self._diagnostic(message, style="green")

    def warning(self, message: str) -> None:
        """Warning line, always shown."""
        self._diagnostic(message, prefix="Warning:", style="yellow")

    def error(self, message: str) -> None:
        """Error line, always shown."""
        self._diagnostic(message, prefix="Error:", style="bold red")

    def debug(self, message: str) -> None:
        """Debug line; only with ``--verbose``."""
        if self._verbose:
            self._diagnostic(f"[debug] {message}", style="dim")

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _diagnostic(
        self, message: str, prefix: str = "", style: Optional[str] = None
    ) -> None:
        if self._no_color or style is None:
            text = f"{prefix} {message}" if prefix else message
            print(text, file=sys.stderr, flush=True)
        elif prefix:
            self._stderr.print(f"[{style}]{prefix}[/{style}] {message}", markup=True, highlight=False)
        else:
            self._stderr.print(f"[{style}]{message}[/{style}]", markup=True, highlight=False)

    def _print_plain(self, data: Any) -> None:
        if isinstance(data, str):
            self.print_data(data)
        elif isinstance(data, (dict, list)):
            self.print_data(_dump(data))
        else:
            self.print_data(str(data))

    def _print_rich(self, data: Any) -> None:
        if isinstance(data, str):
            # Text bodies that happen to be JSON still get highlighted.
            try:
                data = json.loads(data)
            except ValueError:
                self._stdout.print(data, markup=False)
                return
        syntax = Syntax(_dump(data), "json", theme="monokai", word_wrap=True)
        self._stdout.print(syntax)


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _dump(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _color_disabled_by_env() -> bool:
    """``NO_COLOR`` set to anything, or ``TERM=dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


def configure_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Send :mod:`logging` records to stderr through a :class:`RichHandler`.

    Safe to call repeatedly; each call replaces the root handlers.

    Args:
        verbose: Log at ``DEBUG`` (cache hits, misses, saves) instead of
            ``WARNING``.
        console: Console to log to. Defaults to the active
            :class:`OutputManager`'s stderr console.
    """
    handler = RichHandler(
        console=console or get_output().stderr_console,
        show_time=False,
        show_path=verbose,
        rich_tracebacks=verbose,
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        handlers=[handler],
        force=True,
    )


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the active :class:`OutputManager`, creating an ``AUTO`` one if unset."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the active manager."""
    global _output
    _output = output


def reset_output() -> None:
    """Forget the active manager (used between tests)."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
