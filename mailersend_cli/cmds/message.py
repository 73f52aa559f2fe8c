"""Message inspection commands for the MailerSend CLI."""

from typing import Optional

import typer

from ..render import data_of, truncate
from ..utils.client_factory import get_client_and_formatter
from ..app import handle_exceptions

app = typer.Typer()
scheduled_app = typer.Typer()
app.add_typer(scheduled_app, name="scheduled", help="Manage scheduled messages")


@app.command("list")
@handle_exceptions
def list_messages(
    ctx: typer.Context,
    limit: int = typer.Option(0, "--limit", help="Maximum number of messages to return (0 = all)"),
) -> None:
    """List sent messages."""
    client, formatter = get_client_and_formatter(ctx)

    messages = client.list_messages(limit=limit)
    rows = [[m.get("id"), m.get("created_at"), m.get("updated_at")] for m in messages]
    formatter.output(messages, ["ID", "CREATED AT", "UPDATED AT"], rows)


@app.command()
@handle_exceptions
def get(
    ctx: typer.Context,
    message_id: str = typer.Argument(..., help="Message ID"),
) -> None:
    """Get message details."""
    client, formatter = get_client_and_formatter(ctx)

    result = client.get_message(message_id)
    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    fields = [
        ["ID", d.get("id")],
        ["Created At", d.get("created_at")],
        ["Updated At", d.get("updated_at")],
        ["Domain", (d.get("domain") or {}).get("name")],
    ]

    emails = d.get("emails") or []
    if emails:
        first = emails[0]
        fields += [
            ["Subject", first.get("subject")],
            ["From", first.get("from")],
            ["Status", first.get("status")],
        ]
    if len(emails) > 1:
        fields.append(["Email Count", len(emails)])

    formatter.render_detail(fields)


@scheduled_app.command("list")
@handle_exceptions
def list_scheduled(
    ctx: typer.Context,
    domain: Optional[str] = typer.Option(None, "--domain", help="Filter by domain name or ID"),
    status: Optional[str] = typer.Option(None, "--status", help="Filter by status (scheduled|sending|sent|error)"),
    limit: int = typer.Option(0, "--limit", help="Maximum number of messages to return (0 = all)"),
) -> None:
    """List scheduled messages."""
    client, formatter = get_client_and_formatter(ctx)
    domain_id = client.domain_resolver.resolve_id(domain) if domain else None

    items = client.list_scheduled_messages(domain_id=domain_id, status=status, limit=limit)
    rows = [
        [m.get("message_id"), truncate(m.get("subject"), 40), m.get("send_at"), m.get("status"), m.get("created_at")]
        for m in items
    ]
    formatter.output(items, ["MESSAGE ID", "SUBJECT", "SEND AT", "STATUS", "CREATED AT"], rows)


@scheduled_app.command("get")
@handle_exceptions
def get_scheduled(
    ctx: typer.Context,
    message_id: str = typer.Argument(..., help="Message ID"),
) -> None:
    """Get scheduled message details."""
    client, formatter = get_client_and_formatter(ctx)

    result = client.get_scheduled_message(message_id)
    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    domain = d.get("domain") or {}
    formatter.render_detail([
        ["Message ID", d.get("message_id")],
        ["Subject", d.get("subject")],
        ["Send At", d.get("send_at")],
        ["Status", d.get("status")],
        ["Status Message", d.get("status_message") or ""],
        ["Created At", d.get("created_at")],
        ["Domain", domain.get("name")],
        ["Domain ID", domain.get("id")],
        ["Related Message ID", (d.get("message") or {}).get("id")],
    ])


@scheduled_app.command("delete")
@handle_exceptions
def delete_scheduled(
    ctx: typer.Context,
    message_id: str = typer.Argument(..., help="Message ID"),
) -> None:
    """Delete a scheduled message."""
    client, formatter = get_client_and_formatter(ctx)

    client.delete_scheduled_message(message_id)
    if formatter.json_output:
        formatter.render_json({"status": "deleted", "message_id": message_id})
        return
    formatter.success(f"Scheduled message {message_id} deleted successfully.")
