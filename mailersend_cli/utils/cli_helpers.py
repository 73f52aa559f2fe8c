"""Helpers shared by command implementations: prompting and date flags."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List, Optional, Tuple

from rich.prompt import Confirm, Prompt

from ..exceptions import ValidationError


def is_interactive() -> bool:
    """Whether stdin is a terminal we can prompt on."""
    try:
        return sys.stdin.isatty()
    except (AttributeError, ValueError):
        return False


def require_arg(value: Optional[str], flag: str, label: str) -> str:
    """Return ``value``, prompting for it when missing and interactive.

    Raises:
        ValidationError: If the value is missing and we cannot prompt
    """
    if value:
        return value
    if not is_interactive():
        raise ValidationError(f"--{flag} is required")

    answer = Prompt.ask(label).strip()
    if not answer:
        raise ValidationError(f"--{flag} is required")
    return answer


def require_list(values: Optional[List[str]], flag: str, label: str) -> List[str]:
    """Like :func:`require_arg` for repeatable, comma-separated options."""
    items = split_csv(values)
    if items:
        return items
    return split_csv([require_arg(None, flag, label)])


def confirm(question: str, default: bool = False) -> bool:
    """Ask for confirmation; non-interactive sessions proceed."""
    if not is_interactive():
        return True
    return Confirm.ask(question, default=default)


def parse_date(value: str) -> int:
    """Parse ``YYYY-MM-DD`` (UTC midnight) or a unix timestamp.

    Returns:
        Unix timestamp in seconds
    """
    try:
        parsed = datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=timezone.utc)
        return int(parsed.timestamp())
    except ValueError:
        pass

    try:
        return int(value)
    except ValueError:
        raise ValidationError(f'invalid date "{value}": use YYYY-MM-DD or a unix timestamp')


def default_date_range(
    date_from: Optional[str],
    date_to: Optional[str],
    now: Optional[datetime] = None,
) -> Tuple[int, int]:
    """Resolve ``--date-from``/``--date-to``; missing ends default to the last 7 days."""
    now = now or datetime.now(timezone.utc)
    start = parse_date(date_from) if date_from else int((now - timedelta(days=7)).timestamp())
    end = parse_date(date_to) if date_to else int(now.timestamp())
    return start, end


def read_lines(path: Path) -> List[str]:
    """Read non-empty, stripped lines from a file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ValidationError(f"failed to read {path}: {e}")
    return [line.strip() for line in text.splitlines() if line.strip()]


def split_csv(values: Optional[List[str]]) -> List[str]:
    """Flatten repeated and comma-separated option values."""
    items: List[str] = []
    for value in values or []:
        items.extend(part.strip() for part in value.split(",") if part.strip())
    return items
