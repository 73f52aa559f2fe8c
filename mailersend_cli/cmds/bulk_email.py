"""Bulk email commands for the MailerSend CLI."""

import json
from pathlib import Path
from typing import Optional

import typer

from ..exceptions import ValidationError
from ..render import data_of
from ..utils.cli_helpers import require_arg
from ..utils.client_factory import get_client_and_formatter
from ..app import handle_exceptions

app = typer.Typer()


@app.command()
@handle_exceptions
def send(
    ctx: typer.Context,
    file: Optional[str] = typer.Option(None, "--file", help="JSON file containing an array of messages"),
) -> None:
    """Send a batch of emails described in a JSON file.

    Examples:
        mailersend bulk-email send --file messages.json
    """
    client, formatter = get_client_and_formatter(ctx)

    path = Path(require_arg(file, "file", "Path to JSON file"))
    try:
        messages = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ValidationError(f"failed to read file: {e}")
    except ValueError as e:
        raise ValidationError(f"invalid JSON in file: {e}")

    if not isinstance(messages, list):
        raise ValidationError("invalid JSON in file: expected an array of messages")

    result = client.send_bulk_email(messages)

    if formatter.json_output:
        formatter.render_json(result)
        return

    formatter.success(f"Bulk email sent. ID: {result.get('bulk_email_id', '')}")


@app.command()
@handle_exceptions
def status(
    ctx: typer.Context,
    bulk_email_id: str = typer.Argument(..., help="Bulk email ID"),
) -> None:
    """Show the processing status of a bulk email."""
    client, formatter = get_client_and_formatter(ctx)

    result = client.get_bulk_email_status(bulk_email_id)
    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    formatter.render_detail([
        ["ID", d.get("id")],
        ["State", d.get("state")],
        ["Total Recipients", d.get("total_recipients_count", 0)],
        ["Suppressed Recipients", d.get("suppressed_recipients_count", 0)],
        ["Validation Errors", d.get("validation_errors_count", 0)],
        ["Messages", ", ".join(d.get("messages_id") or [])],
        ["Created At", d.get("created_at")],
        ["Updated At", d.get("updated_at")],
    ])
