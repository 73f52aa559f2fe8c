"""Unit tests for output rendering."""

import io
import json

import pytest
from rich.console import Console

from mailersend_cli.exceptions import ValidationError
from mailersend_cli.render import (
    OutputFormatter,
    check_mark,
    data_of,
    truncate,
    yes_no,
)


def make_console() -> Console:
    return Console(file=io.StringIO(), width=120, color_system=None, highlight=False)


@pytest.fixture
def formatter():
    return OutputFormatter(console=make_console(), err_console=make_console())


@pytest.fixture
def json_formatter():
    return OutputFormatter(console=make_console(), err_console=make_console(), json_output=True)


def stdout_of(formatter: OutputFormatter) -> str:
    return formatter.console.file.getvalue()


def stderr_of(formatter: OutputFormatter) -> str:
    return formatter.err_console.file.getvalue()


class TestHelpers:
    """Cell formatting helpers."""

    @pytest.mark.parametrize("value,max_len,expected", [
        ("short", 10, "short"),
        ("exactly ten", 11, "exactly ten"),
        ("a much longer subject line", 10, "a much ..."),
        ("abcdef", 3, "abc"),
        (None, 5, ""),
        (12345, 4, "1..."),
    ])
    def test_truncate(self, value, max_len, expected):
        assert truncate(value, max_len) == expected

    def test_yes_no(self):
        assert yes_no(True) == "Yes"
        assert yes_no(None) == "No"

    def test_check_mark(self):
        assert check_mark(1) == "✓"
        assert check_mark(False) == "✗"

    def test_data_of(self):
        assert data_of({"data": {"id": "x"}}) == {"id": "x"}
        assert data_of({"data": None}) == {}
        assert data_of({"id": "x"}) == {"id": "x"}
        assert data_of(None) == {}


class TestTables:
    """Table rendering."""

    def test_table_has_headers_and_rows(self, formatter):
        formatter.render_table(["ID", "NAME"], [["d1", "example.com"], ["d2", None]])

        output = stdout_of(formatter)
        assert "ID" in output
        assert "NAME" in output
        assert "example.com" in output
        assert "d2" in output
        assert "None" not in output

    def test_empty_table(self, formatter):
        formatter.render_table(["ID"], [])

        assert stdout_of(formatter).strip() == "No results found."

    def test_detail(self, formatter):
        formatter.render_detail([["ID", "d1"], ["Name", "example.com"]])

        output = stdout_of(formatter)
        assert "FIELD" in output
        assert "VALUE" in output
        assert "example.com" in output


class TestJSON:
    """JSON rendering."""

    def test_json_goes_to_stdout(self, json_formatter, capsys):
        json_formatter.render_json({"id": "d1", "name": "café.com"})

        out = capsys.readouterr().out
        assert json.loads(out) == {"id": "d1", "name": "café.com"}
        assert "café" in out
        assert out.startswith("{\n  ")

    def test_output_uses_json_in_json_mode(self, json_formatter, capsys):
        json_formatter.output([{"id": "d1"}], ["ID"], [["d1"]])

        assert json.loads(capsys.readouterr().out) == [{"id": "d1"}]
        assert stdout_of(json_formatter) == ""

    def test_output_uses_table_otherwise(self, formatter, capsys):
        formatter.output([{"id": "d1"}], ["ID"], [["d1"]])

        assert capsys.readouterr().out == ""
        assert "d1" in stdout_of(formatter)

    def test_unserializable_data(self, json_formatter):
        with pytest.raises(ValidationError, match="Failed to serialize data to JSON"):
            json_formatter.render_json({("tuple", "key"): "value"})


class TestMessages:
    """Status messages go to stderr."""

    def test_messages_are_not_markup(self, formatter):
        formatter.success("Profile [work] added.")
        formatter.error("bad [red]thing")
        formatter.note("waiting")

        err = stderr_of(formatter)
        assert "Profile [work] added." in err
        assert "bad [red]thing" in err
        assert "waiting" in err
        assert stdout_of(formatter) == ""
