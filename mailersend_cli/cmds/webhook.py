"""Webhook management commands for the MailerSend CLI."""

from typing import Any, Dict, List, Optional

import typer

from ..exceptions import ValidationError
from ..render import data_of, truncate, yes_no
from ..utils.cli_helpers import require_arg, split_csv
from ..utils.client_factory import get_client_and_formatter
from ..app import handle_exceptions

app = typer.Typer()


@app.command("list")
@handle_exceptions
def list_webhooks(
    ctx: typer.Context,
    domain: Optional[str] = typer.Option(None, "--domain", help="Domain name or ID"),
    limit: int = typer.Option(0, "--limit", help="Maximum number of webhooks to return (0 = all)"),
) -> None:
    """List the webhooks of a domain."""
    domain = require_arg(domain, "domain", "Domain name or ID")

    client, formatter = get_client_and_formatter(ctx)
    domain_id = client.domain_resolver.resolve_id(domain)
    webhooks = client.list_webhooks(domain_id, limit=limit)

    rows = [
        [w.get("id"), truncate(w.get("name"), 40), truncate(w.get("url"), 50), yes_no(w.get("enabled")), w.get("created_at")]
        for w in webhooks
    ]
    formatter.output(webhooks, ["ID", "NAME", "URL", "ENABLED", "CREATED AT"], rows)


@app.command()
@handle_exceptions
def get(
    ctx: typer.Context,
    webhook_id: str = typer.Argument(..., help="Webhook ID"),
) -> None:
    """Get webhook details."""
    client, formatter = get_client_and_formatter(ctx)

    result = client.get_webhook(webhook_id)
    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    formatter.render_detail([
        ["ID", d.get("id")],
        ["Name", d.get("name")],
        ["URL", d.get("url")],
        ["Enabled", yes_no(d.get("enabled"))],
        ["Events", ", ".join(d.get("events") or [])],
        ["Created At", d.get("created_at")],
        ["Updated At", d.get("updated_at")],
    ])


@app.command()
@handle_exceptions
def create(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Webhook name"),
    url: Optional[str] = typer.Option(None, "--url", help="Webhook URL"),
    domain: Optional[str] = typer.Option(None, "--domain", help="Domain name or ID"),
    events: Optional[List[str]] = typer.Option(None, "--events", help="Events to subscribe to (repeat or comma-separate)"),
    enabled: bool = typer.Option(True, "--enabled/--disabled", help="Whether the webhook is enabled"),
) -> None:
    """Create a webhook.

    Examples:
        mailersend webhook create --domain example.com --name hooks \\
            --url https://example.com/hook --events activity.sent,activity.delivered
    """
    name = require_arg(name, "name", "Webhook name")
    url = require_arg(url, "url", "Webhook URL")
    domain = require_arg(domain, "domain", "Domain name or ID")
    event_list = split_csv(events)
    if not event_list:
        raise ValidationError("--events is required")

    client, formatter = get_client_and_formatter(ctx)
    domain_id = client.domain_resolver.resolve_id(domain)
    result = client.create_webhook(domain_id, name, url, event_list, enabled=enabled)

    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    formatter.success(f"Webhook created successfully. ID: {d.get('id')}")


@app.command()
@handle_exceptions
def update(
    ctx: typer.Context,
    webhook_id: str = typer.Argument(..., help="Webhook ID"),
    name: Optional[str] = typer.Option(None, "--name", help="Webhook name"),
    url: Optional[str] = typer.Option(None, "--url", help="Webhook URL"),
    events: Optional[List[str]] = typer.Option(None, "--events", help="Events to subscribe to (repeat or comma-separate)"),
    enabled: Optional[bool] = typer.Option(None, "--enabled/--disabled", help="Whether the webhook is enabled"),
    version: Optional[int] = typer.Option(None, "--version", help="Webhook payload version (1 or 2)"),
) -> None:
    """Update a webhook. Only the options given are changed."""
    changes: Dict[str, Any] = {}
    if name is not None:
        changes["name"] = name
    if url is not None:
        changes["url"] = url
    if events:
        changes["events"] = split_csv(events)
    if enabled is not None:
        changes["enabled"] = enabled
    if version is not None:
        changes["version"] = version

    client, formatter = get_client_and_formatter(ctx)
    result = client.update_webhook(webhook_id, changes)

    if formatter.json_output:
        formatter.render_json(result)
        return
    formatter.success(f"Webhook {webhook_id} updated successfully.")


@app.command()
@handle_exceptions
def delete(
    ctx: typer.Context,
    webhook_id: str = typer.Argument(..., help="Webhook ID"),
) -> None:
    """Delete a webhook."""
    client, formatter = get_client_and_formatter(ctx)

    client.delete_webhook(webhook_id)
    formatter.success(f"Webhook {webhook_id} deleted successfully.")
