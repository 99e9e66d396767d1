"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet and verbose modes
- JSON and plain rendering of payloads, tables, and timelines
- Global instance management
"""

from __future__ import annotations

import json

import pytest

from tweetkit import output as output_module
from tweetkit.models import Status
from tweetkit.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


@pytest.fixture(autouse=True)
def _reset_global_output():
    reset_output()
    yield
    reset_output()


@pytest.fixture()
def non_tty(monkeypatch):
    monkeypatch.setattr("tweetkit.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    monkeypatch.setattr("tweetkit.output._is_tty", lambda: True)


def _statuses() -> list[Status]:
    return [
        Status.model_validate(
            {"id": 1, "id_str": "1", "text": "first\nline", "user": {"id": 9, "screen_name": "jack"}}
        ),
        Status.model_validate({"id": 2, "full_text": "second"}),
    ]


# ------------------------------------------------------------------ #
# Format resolution and colour
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        assert OutputManager().format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager().format == OutputFormat.RICH

    def test_no_color_flag_forces_plain(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        assert OutputManager(no_color=True).format == OutputFormat.PLAIN

    def test_explicit_json_stays_json(self, tty):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColorDisabling:
    def test_no_color_env_any_value(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term_keeps_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# Diagnostics on stderr
# ------------------------------------------------------------------ #


class TestDiagnostics:
    def test_messages_go_to_stderr(self, capsys):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.info("hello")
        mgr.error("broken")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "hello" in captured.err
        assert "Error: broken" in captured.err

    def test_quiet_suppresses_info_but_not_errors(self, capsys):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.info("hidden")
        mgr.success("hidden too")
        mgr.suggest("hidden as well")
        mgr.error("shown")
        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "Error: shown" in err

    def test_debug_only_when_verbose(self, capsys):
        OutputManager(no_color=True).debug("silent")
        OutputManager(no_color=True, verbose=True).debug("loud")
        err = capsys.readouterr().err
        assert "silent" not in err
        assert "[debug] loud" in err

    def test_markup_in_messages_is_escaped(self, capsys):
        mgr = OutputManager(format=OutputFormat.RICH)
        mgr.error("[bold]not markup[/bold]")
        assert "[bold]not markup[/bold]" in capsys.readouterr().err


# ------------------------------------------------------------------ #
# Data on stdout
# ------------------------------------------------------------------ #


class TestData:
    def test_json_response(self, capsys):
        OutputManager(format=OutputFormat.JSON).format_response({"id": 1, "text": "é"})
        captured = capsys.readouterr()
        assert json.loads(captured.out) == {"id": 1, "text": "é"}
        assert captured.err == ""

    def test_plain_dict(self, capsys):
        OutputManager(format=OutputFormat.PLAIN).format_response({"a": 1, "b": {"c": 2}})
        assert capsys.readouterr().out == 'a\t1\nb\t{"c": 2}\n'

    def test_plain_scalar(self, capsys):
        OutputManager(format=OutputFormat.PLAIN).format_response(False)
        assert capsys.readouterr().out == "False\n"

    def test_table_plain(self, capsys):
        OutputManager(format=OutputFormat.PLAIN).print_table(["a", "b"], [["1", "2"]])
        assert capsys.readouterr().out == "a\tb\n1\t2\n"

    def test_table_json(self, capsys):
        OutputManager(format=OutputFormat.JSON).print_table(["a", "b"], [["1", "2"]])
        assert json.loads(capsys.readouterr().out) == [{"a": "1", "b": "2"}]

    def test_statuses_plain(self, capsys):
        OutputManager(format=OutputFormat.PLAIN).print_statuses(_statuses())
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "id\tuser\tcreated_at\ttext"
        assert lines[1] == "1\t@jack\t\tfirst line"
        assert lines[2] == "2\t\t\tsecond"

    def test_statuses_json(self, capsys):
        OutputManager(format=OutputFormat.JSON).print_statuses(_statuses())
        data = json.loads(capsys.readouterr().out)
        assert [item["id"] for item in data] == [1, 2]
        assert data[0]["user"]["screen_name"] == "jack"


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_lazy_default(self):
        assert isinstance(get_output(), OutputManager)
        assert get_output() is get_output()

    def test_set_and_reset(self):
        mgr = OutputManager(format=OutputFormat.JSON)
        set_output(mgr)
        assert get_output() is mgr
        reset_output()
        assert get_output() is not mgr

    def test_module_functions_delegate(self, capsys):
        set_output(OutputManager(format=OutputFormat.JSON, no_color=True, verbose=True))
        output_module.format_response([1, 2])
        output_module.debug("trace")
        captured = capsys.readouterr()
        assert json.loads(captured.out) == [1, 2]
        assert "[debug] trace" in captured.err
