"""Tests for workflow command formatting and step outputs."""

import logging

import pytest

from skipgate.cli_utils.annotations import ActionsFormatter
from skipgate.cli_utils.outputs import _set_output


def _record(level, msg):
    return logging.LogRecord("skipgate", level, __file__, 1, msg, None, None)


def test_formatter_maps_levels_to_commands():
    formatter = ActionsFormatter()
    assert formatter.format(_record(logging.ERROR, "boom")) == "::error::boom"
    assert formatter.format(_record(logging.WARNING, "careful")) == "::warning::careful"
    assert formatter.format(_record(logging.DEBUG, "detail")) == "::debug::detail"
    assert formatter.format(_record(logging.INFO, "plain")) == "plain"


def test_formatter_escapes_command_data():
    formatter = ActionsFormatter()
    assert formatter.format(_record(logging.ERROR, "100%\nfailed")) == "::error::100%25%0Afailed"


def test_set_output_appends_to_file(tmp_path):
    output = tmp_path / "github_output"
    output.write_text("other=1\n")

    assert _set_output("skip", "true", str(output))
    assert output.read_text() == "other=1\nskip=true\n"


def test_set_output_without_file_reports_fallback():
    assert not _set_output("skip", "false", None)


def test_set_output_rejects_multiline_values(tmp_path):
    with pytest.raises(ValueError):
        _set_output("skip", "a\nb", str(tmp_path / "out"))


def test_set_output_unwritable_file_reports_fallback(tmp_path, caplog):
    assert not _set_output("skip", "false", str(tmp_path / "missing" / "out"))
    assert "Cannot write output skip" in caplog.text
