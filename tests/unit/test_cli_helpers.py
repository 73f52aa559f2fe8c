"""Unit tests for command helpers."""

from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from mailersend_cli.exceptions import ValidationError
from mailersend_cli.utils.cli_helpers import (
    confirm,
    default_date_range,
    parse_date,
    read_lines,
    require_arg,
    split_csv,
)

NOW = datetime(2025, 1, 8, 0, 0, 0, tzinfo=timezone.utc)


class TestDates:
    """Date flag parsing."""

    def test_calendar_date_is_utc_midnight(self):
        assert parse_date("2025-01-01") == 1735689600

    def test_unix_timestamp(self):
        assert parse_date("1735689600") == 1735689600

    def test_invalid_date(self):
        with pytest.raises(ValidationError, match='invalid date "yesterday"'):
            parse_date("yesterday")

    def test_default_range_is_last_week(self):
        start, end = default_date_range(None, None, now=NOW)

        assert start == 1735689600
        assert end == 1736294400

    def test_explicit_range(self):
        assert default_date_range("2025-01-01", "2025-01-02", now=NOW) == (1735689600, 1735776000)


class TestPrompts:
    """Prompting falls back to errors or defaults when not interactive."""

    def test_present_value_is_returned(self):
        assert require_arg("x@y.z", "to", "Recipient") == "x@y.z"

    def test_missing_value_non_interactive(self):
        with patch("mailersend_cli.utils.cli_helpers.is_interactive", return_value=False):
            with pytest.raises(ValidationError, match="--subject is required"):
                require_arg(None, "subject", "Subject")

    def test_missing_value_is_prompted(self):
        with patch("mailersend_cli.utils.cli_helpers.is_interactive", return_value=True), \
                patch("mailersend_cli.utils.cli_helpers.Prompt.ask", return_value="  Hello  "):
            assert require_arg(None, "subject", "Subject") == "Hello"

    def test_blank_prompt_answer(self):
        with patch("mailersend_cli.utils.cli_helpers.is_interactive", return_value=True), \
                patch("mailersend_cli.utils.cli_helpers.Prompt.ask", return_value=""):
            with pytest.raises(ValidationError):
                require_arg(None, "subject", "Subject")

    def test_confirm_non_interactive(self):
        with patch("mailersend_cli.utils.cli_helpers.is_interactive", return_value=False):
            assert confirm("Delete?") is True

    def test_confirm_interactive(self):
        with patch("mailersend_cli.utils.cli_helpers.is_interactive", return_value=True), \
                patch("mailersend_cli.utils.cli_helpers.Confirm.ask", return_value=False) as ask:
            assert confirm("Delete?") is False

        ask.assert_called_once_with("Delete?", default=False)


class TestListInputs:
    """List-valued flags and files."""

    def test_split_csv(self):
        assert split_csv(["a@b.c,d@e.f", " g@h.i ", ""]) == ["a@b.c", "d@e.f", "g@h.i"]
        assert split_csv(None) == []

    def test_read_lines(self, tmp_path):
        path = tmp_path / "emails.txt"
        path.write_text("a@b.c\n\n  d@e.f  \n", encoding="utf-8")

        assert read_lines(path) == ["a@b.c", "d@e.f"]

    def test_read_missing_file(self, tmp_path):
        with pytest.raises(ValidationError, match="failed to read"):
            read_lines(tmp_path / "missing.txt")
