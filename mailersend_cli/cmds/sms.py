"""SMS commands for the MailerSend CLI.

``sms send`` sends a message. The sub-groups manage sending numbers, read
activity, messages and recipients, and configure webhooks and inbound
routes per number.
"""

from typing import Any, Dict, List, Optional

import typer

from ..render import data_of, yes_no
from ..utils.cli_helpers import confirm, parse_date, require_arg, require_list, split_csv
from ..utils.client_factory import get_client_and_formatter
from ..app import handle_exceptions

app = typer.Typer()
number_app = typer.Typer()
activity_app = typer.Typer()
message_app = typer.Typer()
recipient_app = typer.Typer()
webhook_app = typer.Typer()
inbound_app = typer.Typer()
app.add_typer(number_app, name="number", help="Manage SMS numbers")
app.add_typer(activity_app, name="activity", help="Inspect SMS activity")
app.add_typer(message_app, name="message", help="Inspect SMS messages")
app.add_typer(recipient_app, name="recipient", help="Manage SMS recipients")
app.add_typer(webhook_app, name="webhook", help="Manage SMS webhooks")
app.add_typer(inbound_app, name="inbound", help="Manage SMS inbound routes")


@app.command()
@handle_exceptions
def send(
    ctx: typer.Context,
    sender: Optional[str] = typer.Option(None, "--from", help="Sender phone number"),
    to: Optional[List[str]] = typer.Option(None, "--to", help="Recipient phone numbers (repeat or comma-separate)"),
    text: Optional[str] = typer.Option(None, "--text", help="Message text"),
) -> None:
    """Send an SMS.

    Examples:
        mailersend sms send --from +15550001111 --to +15550002222 --text "Hello"
    """
    sender = require_arg(sender, "from", "Sender phone number")
    recipients = split_csv(to)
    if not recipients:
        recipients = [require_arg(None, "to", "Recipient phone number")]
    text = require_arg(text, "text", "Message text")

    client, formatter = get_client_and_formatter(ctx)
    message_id = client.send_sms(sender, recipients, text)

    if formatter.json_output:
        result = {"status": "sent"}
        if message_id:
            result["message_id"] = message_id
        formatter.render_json(result)
        return

    formatter.success("SMS sent successfully.")


@number_app.command("list")
@handle_exceptions
def list_numbers(
    ctx: typer.Context,
    limit: int = typer.Option(0, "--limit", help="Maximum number of numbers to return (0 = all)"),
    paused: Optional[bool] = typer.Option(None, "--paused/--active", help="Filter by paused status"),
) -> None:
    """List SMS numbers."""
    client, formatter = get_client_and_formatter(ctx)

    numbers = client.list_sms_numbers(paused=paused, limit=limit)
    rows = [[n.get("id"), n.get("telephone_number"), yes_no(n.get("paused")), n.get("created_at")] for n in numbers]
    formatter.output(numbers, ["ID", "NUMBER", "PAUSED", "CREATED AT"], rows)


@number_app.command("get")
@handle_exceptions
def get_number(
    ctx: typer.Context,
    number_id: str = typer.Argument(..., help="SMS number ID"),
) -> None:
    """Get SMS number details."""
    client, formatter = get_client_and_formatter(ctx)

    result = client.get_sms_number(number_id)
    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    formatter.render_detail([
        ["ID", d.get("id")],
        ["Number", d.get("telephone_number")],
        ["Paused", yes_no(d.get("paused"))],
        ["Created At", d.get("created_at")],
    ])


@number_app.command("update")
@handle_exceptions
def update_number(
    ctx: typer.Context,
    number_id: str = typer.Argument(..., help="SMS number ID"),
    paused: bool = typer.Option(..., "--paused/--active", help="Pause or resume the number"),
) -> None:
    """Pause or resume an SMS number."""
    client, formatter = get_client_and_formatter(ctx)

    result = client.update_sms_number(number_id, paused)
    if formatter.json_output:
        formatter.render_json(result)
        return
    formatter.success(f"SMS number {number_id} updated successfully.")


@number_app.command("delete")
@handle_exceptions
def delete_number(
    ctx: typer.Context,
    number_id: str = typer.Argument(..., help="SMS number ID"),
) -> None:
    """Delete an SMS number."""
    client, formatter = get_client_and_formatter(ctx)

    if not confirm(f"Delete SMS number {number_id}?"):
        return

    client.delete_sms_number(number_id)
    formatter.success(f"SMS number {number_id} deleted successfully.")


@activity_app.command("list")
@handle_exceptions
def list_activity(
    ctx: typer.Context,
    sms_number_id: Optional[str] = typer.Option(None, "--sms-number-id", help="Filter by SMS number ID"),
    date_from: Optional[str] = typer.Option(None, "--date-from", help="Start date (YYYY-MM-DD or unix timestamp)"),
    date_to: Optional[str] = typer.Option(None, "--date-to", help="End date (YYYY-MM-DD or unix timestamp)"),
    status: Optional[List[str]] = typer.Option(None, "--status", help="Filter by status (repeat or comma-separate)"),
    limit: int = typer.Option(0, "--limit", help="Maximum number of items to return (0 = all)"),
) -> None:
    """List SMS activity."""
    start = parse_date(date_from) if date_from else None
    end = parse_date(date_to) if date_to else None

    client, formatter = get_client_and_formatter(ctx)
    items = client.list_sms_activity(
        sms_number_id=sms_number_id,
        date_from=start,
        date_to=end,
        statuses=split_csv(status),
        limit=limit,
    )

    rows = [
        [a.get("sms_message_id"), a.get("from"), a.get("to"), a.get("status"), a.get("created_at")]
        for a in items
    ]
    formatter.output(items, ["ID", "FROM", "TO", "STATUS", "CREATED AT"], rows)


@message_app.command("list")
@handle_exceptions
def list_messages(
    ctx: typer.Context,
    limit: int = typer.Option(0, "--limit", help="Maximum number of messages to return (0 = all)"),
) -> None:
    """List SMS messages."""
    client, formatter = get_client_and_formatter(ctx)

    messages = client.list_sms_messages(limit=limit)
    rows = [[m.get("id"), m.get("from"), ", ".join(m.get("to") or []), m.get("created_at")] for m in messages]
    formatter.output(messages, ["ID", "FROM", "TO", "CREATED AT"], rows)


@message_app.command("get")
@handle_exceptions
def get_message(
    ctx: typer.Context,
    message_id: str = typer.Argument(..., help="SMS message ID"),
) -> None:
    """Get SMS message details."""
    client, formatter = get_client_and_formatter(ctx)

    result = client.get_sms_message(message_id)
    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    formatter.render_detail([
        ["ID", d.get("id")],
        ["From", d.get("from")],
        ["To", ", ".join(d.get("to") or [])],
        ["Text", d.get("text")],
        ["Created At", d.get("created_at")],
    ])


@recipient_app.command("list")
@handle_exceptions
def list_recipients(
    ctx: typer.Context,
    sms_number_id: Optional[str] = typer.Option(None, "--sms-number-id", help="Filter by SMS number ID"),
    status: Optional[str] = typer.Option(None, "--status", help="Filter by status (active, opt_out)"),
    limit: int = typer.Option(0, "--limit", help="Maximum number of recipients to return (0 = all)"),
) -> None:
    """List SMS recipients."""
    client, formatter = get_client_and_formatter(ctx)

    recipients = client.list_sms_recipients(sms_number_id=sms_number_id, status=status, limit=limit)
    rows = [[r.get("id"), r.get("number"), r.get("status"), r.get("created_at")] for r in recipients]
    formatter.output(recipients, ["ID", "NUMBER", "STATUS", "CREATED AT"], rows)


@recipient_app.command("get")
@handle_exceptions
def get_recipient(
    ctx: typer.Context,
    recipient_id: str = typer.Argument(..., help="SMS recipient ID"),
) -> None:
    """Get SMS recipient details."""
    client, formatter = get_client_and_formatter(ctx)

    result = client.get_sms_recipient(recipient_id)
    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    formatter.render_detail([
        ["ID", d.get("id")],
        ["Number", d.get("number")],
        ["Status", d.get("status")],
        ["Created At", d.get("created_at")],
    ])


@recipient_app.command("update")
@handle_exceptions
def update_recipient(
    ctx: typer.Context,
    recipient_id: str = typer.Argument(..., help="SMS recipient ID"),
    status: Optional[str] = typer.Option(None, "--status", help="Recipient status (active, opt_out)"),
) -> None:
    """Change the status of an SMS recipient."""
    status = require_arg(status, "status", "Recipient status")

    client, formatter = get_client_and_formatter(ctx)
    result = client.update_sms_recipient(recipient_id, status)

    if formatter.json_output:
        formatter.render_json(result)
        return
    formatter.success(f"SMS recipient {recipient_id} updated successfully.")


@webhook_app.command("list")
@handle_exceptions
def list_webhooks(
    ctx: typer.Context,
    sms_number_id: Optional[str] = typer.Option(None, "--sms-number-id", help="SMS number ID"),
) -> None:
    """List the webhooks of an SMS number."""
    sms_number_id = require_arg(sms_number_id, "sms-number-id", "SMS number ID")

    client, formatter = get_client_and_formatter(ctx)
    webhooks = client.list_sms_webhooks(sms_number_id)

    rows = [[w.get("id"), w.get("name"), w.get("url"), yes_no(w.get("enabled"))] for w in webhooks]
    formatter.output(webhooks, ["ID", "NAME", "URL", "ENABLED"], rows)


@webhook_app.command("get")
@handle_exceptions
def get_webhook(
    ctx: typer.Context,
    webhook_id: str = typer.Argument(..., help="SMS webhook ID"),
) -> None:
    """Get SMS webhook details."""
    client, formatter = get_client_and_formatter(ctx)

    result = client.get_sms_webhook(webhook_id)
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
    ])


@webhook_app.command("create")
@handle_exceptions
def create_webhook(
    ctx: typer.Context,
    sms_number_id: Optional[str] = typer.Option(None, "--sms-number-id", help="SMS number ID"),
    name: Optional[str] = typer.Option(None, "--name", help="Webhook name"),
    url: Optional[str] = typer.Option(None, "--url", help="Webhook URL"),
    events: Optional[List[str]] = typer.Option(None, "--events", help="Webhook events (repeat or comma-separate)"),
    enabled: bool = typer.Option(True, "--enabled/--disabled", help="Whether the webhook is enabled"),
) -> None:
    """Create an SMS webhook."""
    sms_number_id = require_arg(sms_number_id, "sms-number-id", "SMS number ID")
    name = require_arg(name, "name", "Webhook name")
    url = require_arg(url, "url", "Webhook URL")
    event_list = require_list(events, "events", "Webhook events")

    client, formatter = get_client_and_formatter(ctx)
    result = client.create_sms_webhook({
        "sms_number_id": sms_number_id,
        "name": name,
        "url": url,
        "events": event_list,
        "enabled": enabled,
    })

    if formatter.json_output:
        formatter.render_json(result)
        return
    formatter.success(f"SMS webhook created successfully. ID: {data_of(result).get('id')}")


@webhook_app.command("update")
@handle_exceptions
def update_webhook(
    ctx: typer.Context,
    webhook_id: str = typer.Argument(..., help="SMS webhook ID"),
    name: Optional[str] = typer.Option(None, "--name", help="Webhook name"),
    url: Optional[str] = typer.Option(None, "--url", help="Webhook URL"),
    events: Optional[List[str]] = typer.Option(None, "--events", help="Webhook events (repeat or comma-separate)"),
    enabled: Optional[bool] = typer.Option(None, "--enabled/--disabled", help="Whether the webhook is enabled"),
) -> None:
    """Update an SMS webhook. Only the options given are changed."""
    changes: Dict[str, Any] = {}
    if name is not None:
        changes["name"] = name
    if url is not None:
        changes["url"] = url
    if events:
        changes["events"] = split_csv(events)
    if enabled is not None:
        changes["enabled"] = enabled

    client, formatter = get_client_and_formatter(ctx)
    result = client.update_sms_webhook(webhook_id, changes)

    if formatter.json_output:
        formatter.render_json(result)
        return
    formatter.success(f"SMS webhook {webhook_id} updated successfully.")


@webhook_app.command("delete")
@handle_exceptions
def delete_webhook(
    ctx: typer.Context,
    webhook_id: str = typer.Argument(..., help="SMS webhook ID"),
) -> None:
    """Delete an SMS webhook."""
    client, formatter = get_client_and_formatter(ctx)

    client.delete_sms_webhook(webhook_id)
    formatter.success(f"SMS webhook {webhook_id} deleted successfully.")


@inbound_app.command("list")
@handle_exceptions
def list_inbound_routes(
    ctx: typer.Context,
    sms_number_id: Optional[str] = typer.Option(None, "--sms-number-id", help="Filter by SMS number ID"),
    enabled: Optional[bool] = typer.Option(None, "--enabled/--disabled", help="Filter by enabled status"),
    limit: int = typer.Option(0, "--limit", help="Maximum number of routes to return (0 = all)"),
) -> None:
    """List SMS inbound routes."""
    client, formatter = get_client_and_formatter(ctx)

    routes = client.list_sms_inbound_routes(sms_number_id=sms_number_id, enabled=enabled, limit=limit)
    rows = [[r.get("id"), r.get("name"), yes_no(r.get("enabled"))] for r in routes]
    formatter.output(routes, ["ID", "NAME", "ENABLED"], rows)


@inbound_app.command("get")
@handle_exceptions
def get_inbound_route(
    ctx: typer.Context,
    inbound_id: str = typer.Argument(..., help="SMS inbound route ID"),
) -> None:
    """Get SMS inbound route details."""
    client, formatter = get_client_and_formatter(ctx)

    result = client.get_sms_inbound_route(inbound_id)
    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    formatter.render_detail([
        ["ID", d.get("id")],
        ["Name", d.get("name")],
        ["Forward URL", d.get("forward_url")],
        ["Enabled", yes_no(d.get("enabled"))],
    ])


@inbound_app.command("create")
@handle_exceptions
def create_inbound_route(
    ctx: typer.Context,
    sms_number_id: Optional[str] = typer.Option(None, "--sms-number-id", help="SMS number ID"),
    name: Optional[str] = typer.Option(None, "--name", help="Route name"),
    forward_url: Optional[str] = typer.Option(None, "--forward-url", help="Forward URL"),
    filter_comparer: Optional[str] = typer.Option(None, "--filter-comparer", help="Filter comparer (equal, not-equal, contains, ...)"),
    filter_value: Optional[str] = typer.Option(None, "--filter-value", help="Filter value"),
    enabled: bool = typer.Option(True, "--enabled/--disabled", help="Whether the route is enabled"),
) -> None:
    """Create an SMS inbound route."""
    sms_number_id = require_arg(sms_number_id, "sms-number-id", "SMS number ID")
    name = require_arg(name, "name", "Route name")
    forward_url = require_arg(forward_url, "forward-url", "Forward URL")

    route: Dict[str, Any] = {
        "sms_number_id": sms_number_id,
        "name": name,
        "forward_url": forward_url,
        "enabled": enabled,
    }
    if filter_comparer:
        route["filter"] = {"comparer": filter_comparer, "value": filter_value or ""}

    client, formatter = get_client_and_formatter(ctx)
    result = client.create_sms_inbound_route(route)

    if formatter.json_output:
        formatter.render_json(result)
        return
    formatter.success(f"SMS inbound route created successfully. ID: {data_of(result).get('id')}")


@inbound_app.command("update")
@handle_exceptions
def update_inbound_route(
    ctx: typer.Context,
    inbound_id: str = typer.Argument(..., help="SMS inbound route ID"),
    sms_number_id: Optional[str] = typer.Option(None, "--sms-number-id", help="SMS number ID"),
    name: Optional[str] = typer.Option(None, "--name", help="Route name"),
    forward_url: Optional[str] = typer.Option(None, "--forward-url", help="Forward URL"),
    filter_comparer: Optional[str] = typer.Option(None, "--filter-comparer", help="Filter comparer"),
    filter_value: Optional[str] = typer.Option(None, "--filter-value", help="Filter value"),
    enabled: Optional[bool] = typer.Option(None, "--enabled/--disabled", help="Whether the route is enabled"),
) -> None:
    """Update an SMS inbound route. Only the options given are changed."""
    changes: Dict[str, Any] = {}
    if sms_number_id is not None:
        changes["sms_number_id"] = sms_number_id
    if name is not None:
        changes["name"] = name
    if forward_url is not None:
        changes["forward_url"] = forward_url
    if filter_comparer is not None or filter_value is not None:
        changes["filter"] = {"comparer": filter_comparer or "", "value": filter_value or ""}
    if enabled is not None:
        changes["enabled"] = enabled

    client, formatter = get_client_and_formatter(ctx)
    result = client.update_sms_inbound_route(inbound_id, changes)

    if formatter.json_output:
        formatter.render_json(result)
        return
    formatter.success(f"SMS inbound route {inbound_id} updated successfully.")


@inbound_app.command("delete")
@handle_exceptions
def delete_inbound_route(
    ctx: typer.Context,
    inbound_id: str = typer.Argument(..., help="SMS inbound route ID"),
) -> None:
    """Delete an SMS inbound route."""
    client, formatter = get_client_and_formatter(ctx)

    client.delete_sms_inbound_route(inbound_id)
    formatter.success(f"SMS inbound route {inbound_id} deleted successfully.")
