"""Tests for fetchcache.output -- formats, stream discipline, logging setup."""

from __future__ import annotations

import json
import logging

import pytest
from rich.logging import RichHandler

from fetchcache.output import (
    OutputFormat,
    OutputManager,
    configure_logging,
    get_output,
    info,
    reset_output,
    set_output,
)


# ---------------------------------------------------------------------------
# Format resolution
# ---------------------------------------------------------------------------


class TestFormatResolution:
    def test_auto_is_plain_when_not_a_tty(self, capsys: pytest.CaptureFixture) -> None:
        assert OutputManager().format == OutputFormat.PLAIN

    def test_explicit_format_is_kept(self) -> None:
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON

    def test_no_color_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NO_COLOR", "")
        assert OutputManager()._no_color is True

    def test_dumb_terminal(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert OutputManager()._no_color is True


# ---------------------------------------------------------------------------
# Data output (stdout)
# ---------------------------------------------------------------------------


class TestFormatResponse:
    def test_json_dict(self, capsys: pytest.CaptureFixture) -> None:
        OutputManager(format=OutputFormat.JSON).format_response({"a": [1, 2]})
        captured = capsys.readouterr()
        assert json.loads(captured.out) == {"a": [1, 2]}
        assert captured.err == ""

    def test_json_none_prints_null(self, capsys: pytest.CaptureFixture) -> None:
        OutputManager(format=OutputFormat.JSON).format_response(None)
        assert capsys.readouterr().out.strip() == "null"

    def test_plain_string(self, capsys: pytest.CaptureFixture) -> None:
        OutputManager(format=OutputFormat.PLAIN).format_response("hello")
        assert capsys.readouterr().out == "hello\n"

    def test_plain_dict_is_json(self, capsys: pytest.CaptureFixture) -> None:
        OutputManager(format=OutputFormat.PLAIN).format_response({"k": "v"})
        assert json.loads(capsys.readouterr().out) == {"k": "v"}

    def test_plain_none_prints_nothing(self, capsys: pytest.CaptureFixture) -> None:
        OutputManager(format=OutputFormat.PLAIN).format_response(None)
        assert capsys.readouterr().out == ""


class TestPrintTable:
    def test_plain_is_tab_separated(self, capsys: pytest.CaptureFixture) -> None:
        OutputManager(format=OutputFormat.PLAIN).print_table(
            ["Method", "Entries"], [["GET", "2"], ["total", "2"]]
        )
        assert capsys.readouterr().out == "Method\tEntries\nGET\t2\ntotal\t2\n"

    def test_json_is_list_of_records(self, capsys: pytest.CaptureFixture) -> None:
        OutputManager(format=OutputFormat.JSON).print_table(["a", "b"], [["1", "2"]])
        assert json.loads(capsys.readouterr().out) == [{"a": "1", "b": "2"}]


# ---------------------------------------------------------------------------
# Diagnostics (stderr)
# ---------------------------------------------------------------------------


class TestDiagnostics:
    def test_info_goes_to_stderr(self, capsys: pytest.CaptureFixture) -> None:
        OutputManager(no_color=True).info("status")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "status\n"

    def test_quiet_hides_info_and_success(self, capsys: pytest.CaptureFixture) -> None:
        output = OutputManager(no_color=True, quiet=True)
        output.info("a")
        output.success("b")
        assert capsys.readouterr().err == ""

    def test_quiet_keeps_warning_and_error(self, capsys: pytest.CaptureFixture) -> None:
        output = OutputManager(no_color=True, quiet=True)
        output.warning("careful")
        output.error("broken")
        assert capsys.readouterr().err == "Warning: careful\nError: broken\n"

    def test_debug_needs_verbose(self, capsys: pytest.CaptureFixture) -> None:
        OutputManager(no_color=True).debug("hidden")
        OutputManager(no_color=True, verbose=True).debug("shown")
        assert capsys.readouterr().err == "[debug] shown\n"


# ---------------------------------------------------------------------------
# Global instance
# ---------------------------------------------------------------------------


class TestGlobalOutput:
    def test_lazily_created(self) -> None:
        reset_output()
        assert isinstance(get_output(), OutputManager)
        assert get_output() is get_output()

    def test_set_output_is_used_by_helpers(self, capsys: pytest.CaptureFixture) -> None:
        set_output(OutputManager(no_color=True))
        info("via helper")
        assert capsys.readouterr().err == "via helper\n"


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    def test_verbose_logs_debug_through_rich(self) -> None:
        configure_logging(verbose=True)
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], RichHandler)

    def test_default_level_is_warning(self) -> None:
        configure_logging()
        assert logging.getLogger().level == logging.WARNING

    def test_reconfiguring_replaces_handler(self) -> None:
        configure_logging(verbose=True)
        configure_logging(verbose=False)
        assert len(logging.getLogger().handlers) == 1
