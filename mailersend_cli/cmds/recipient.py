"""Recipient commands for the MailerSend CLI."""

from typing import Optional

import typer

from ..render import data_of
from ..utils.client_factory import get_client_and_formatter
from ..app import handle_exceptions

app = typer.Typer()


@app.command("list")
@handle_exceptions
def list_recipients(
    ctx: typer.Context,
    domain: Optional[str] = typer.Option(None, "--domain", help="Filter by domain name or ID"),
    limit: int = typer.Option(0, "--limit", help="Maximum number of recipients to return (0 = all)"),
) -> None:
    """List recipients.

    The recipients endpoint cannot filter by domain, so ``--domain`` fetches
    every recipient and keeps those whose address ends in ``@<domain>``.
    """
    client, formatter = get_client_and_formatter(ctx)

    if domain:
        suffix = "@" + client.domain_resolver.resolve_name(domain).lower()
        recipients = [
            r for r in client.list_recipients()
            if str(r.get("email", "")).lower().endswith(suffix)
        ]
        if limit > 0:
            recipients = recipients[:limit]
    else:
        recipients = client.list_recipients(limit=limit)

    rows = [[r.get("id"), r.get("email"), r.get("created_at")] for r in recipients]
    formatter.output(recipients, ["ID", "EMAIL", "CREATED AT"], rows)


@app.command()
@handle_exceptions
def get(
    ctx: typer.Context,
    recipient_id: str = typer.Argument(..., help="Recipient ID"),
) -> None:
    """Get recipient details."""
    client, formatter = get_client_and_formatter(ctx)

    result = client.get_recipient(recipient_id)
    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    formatter.render_detail([
        ["ID", d.get("id")],
        ["Email", d.get("email")],
        ["Created At", d.get("created_at")],
        ["Updated At", d.get("updated_at")],
    ])


@app.command()
@handle_exceptions
def delete(
    ctx: typer.Context,
    recipient_id: str = typer.Argument(..., help="Recipient ID"),
) -> None:
    """Delete a recipient."""
    client, formatter = get_client_and_formatter(ctx)

    client.delete_recipient(recipient_id)
    formatter.success(f"Recipient {recipient_id} deleted successfully.")
