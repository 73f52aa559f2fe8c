"""Output rendering and formatting utilities.

Results go to stdout either as a Rich table or, with ``--json``, as
indented JSON. Status messages and errors go to stderr. Colour is disabled
by Rich itself when ``NO_COLOR`` is set or the output is not a terminal.
"""

import json
from typing import Any, List, Optional, Sequence

from rich.console import Console
from rich.table import Table
from rich import box

from .exceptions import ValidationError


def truncate(value: Any, max_len: int) -> str:
    """Shorten a value to ``max_len`` characters, marking the cut with '...'."""
    text = "" if value is None else str(value)
    if len(text) <= max_len:
        return text
    if max_len <= 3:
        return text[:max_len]
    return text[: max_len - 3] + "..."


def yes_no(value: Any) -> str:
    return "Yes" if value else "No"


def check_mark(value: Any) -> str:
    return "\u2713" if value else "\u2717"


def data_of(payload: Any) -> Any:
    """Unwrap the ``data`` envelope of a single-resource response."""
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"] or {}
    return payload or {}


class OutputFormatter:
    """Renders command results as tables or JSON."""

    def __init__(
        self,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
        json_output: bool = False,
    ) -> None:
        """Initialize output formatter.

        Args:
            console: Console for results (stdout)
            err_console: Console for status and error messages (stderr)
            json_output: Render results as JSON instead of tables
        """
        self.console = console or Console(highlight=False)
        self.err_console = err_console or Console(stderr=True, highlight=False)
        self.json_output = json_output

    def render_json(self, data: Any) -> None:
        """Render data as indented JSON on stdout."""
        try:
            output = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Failed to serialize data to JSON: {e}")
        print(output)

    def render_table(
        self,
        headers: Sequence[str],
        rows: List[Sequence[Any]],
        title: Optional[str] = None,
    ) -> None:
        """Render rows as a table.

        Args:
            headers: Column headers
            rows: Row values, converted with ``str``
            title: Optional table title
        """
        if not rows:
            self.console.print("[dim]No results found.[/dim]")
            return

        table = Table(title=title, box=box.SIMPLE_HEAD, header_style="bold blue")
        for header in headers:
            table.add_column(header, overflow="fold")
        for row in rows:
            table.add_row(*("" if cell is None else str(cell) for cell in row))

        self.console.print(table)

    def render_detail(self, fields: List[Sequence[Any]]) -> None:
        """Render a single record as a FIELD / VALUE table."""
        self.render_table(["FIELD", "VALUE"], fields)

    def output(self, data: Any, headers: Sequence[str], rows: List[Sequence[Any]]) -> None:
        """Render ``data`` as JSON in JSON mode, otherwise the given table."""
        if self.json_output:
            self.render_json(data)
        else:
            self.render_table(headers, rows)

    def success(self, message: str) -> None:
        self.err_console.print(message, style="green", markup=False, soft_wrap=True)

    def error(self, message: str) -> None:
        self.err_console.print(message, style="red", markup=False, soft_wrap=True)

    def note(self, message: str) -> None:
        self.err_console.print(message, style="dim", markup=False, soft_wrap=True)
