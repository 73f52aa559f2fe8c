"""Activity commands for the MailerSend CLI.

Activity is listed per domain for a date range; ``--date-from`` and
``--date-to`` take ``YYYY-MM-DD`` or a unix timestamp and default to the
last 7 days.
"""

from typing import List, Optional

import typer

from ..render import data_of, truncate
from ..utils.cli_helpers import default_date_range, require_arg, split_csv
from ..utils.client_factory import get_client_and_formatter
from ..app import handle_exceptions

app = typer.Typer()

EVENT_HELP = (
    "Event types to filter (queued, sent, delivered, soft_bounced, hard_bounced, "
    "opened, clicked, unsubscribed, spam_complaints)"
)


@app.command("list")
@handle_exceptions
def list_activity(
    ctx: typer.Context,
    domain: Optional[str] = typer.Option(None, "--domain", help="Domain name or ID"),
    limit: int = typer.Option(0, "--limit", help="Maximum number of results to return (0 = all)"),
    date_from: Optional[str] = typer.Option(None, "--date-from", help="Start date (YYYY-MM-DD or unix timestamp)"),
    date_to: Optional[str] = typer.Option(None, "--date-to", help="End date (YYYY-MM-DD or unix timestamp)"),
    event: Optional[List[str]] = typer.Option(None, "--event", help=EVENT_HELP),
) -> None:
    """List activity for a domain.

    Examples:
        # Last 7 days
        mailersend activity list --domain example.com

        # Deliveries in January, at most 50
        mailersend activity list --domain example.com --date-from 2024-01-01 \\
            --date-to 2024-01-31 --event delivered --limit 50
    """
    domain = require_arg(domain, "domain", "Domain name or ID")
    start, end = default_date_range(date_from, date_to)

    client, formatter = get_client_and_formatter(ctx)
    domain_id = client.domain_resolver.resolve_id(domain)

    items = client.list_activity(domain_id, start, end, events=split_csv(event), limit=limit)

    rows = []
    for item in items:
        email = item.get("email") or {}
        rows.append([
            item.get("id"),
            item.get("type"),
            email.get("from"),
            truncate(email.get("subject"), 40),
            item.get("created_at"),
        ])
    formatter.output(items, ["ID", "TYPE", "FROM", "SUBJECT", "CREATED AT"], rows)


@app.command()
@handle_exceptions
def get(
    ctx: typer.Context,
    activity_id: str = typer.Argument(..., help="Activity ID"),
) -> None:
    """Get details of a single activity."""
    client, formatter = get_client_and_formatter(ctx)

    d = data_of(client.get_activity(activity_id))
    if formatter.json_output:
        formatter.render_json(d)
        return

    email = d.get("email") or {}
    recipient = email.get("recipient") or {}
    formatter.render_detail([
        ["ID", d.get("id")],
        ["Type", d.get("type")],
        ["From", email.get("from")],
        ["Subject", email.get("subject")],
        ["Status", email.get("status")],
        ["Recipient Email", recipient.get("email")],
        ["Created At", d.get("created_at")],
    ])
