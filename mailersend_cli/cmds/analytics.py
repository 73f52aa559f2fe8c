"""Analytics commands for the MailerSend CLI."""

from typing import List, Optional

import typer

from ..exceptions import ValidationError
from ..render import data_of
from ..utils.cli_helpers import default_date_range, split_csv
from ..utils.client_factory import get_client_and_formatter
from ..app import handle_exceptions

app = typer.Typer()


@app.command()
@handle_exceptions
def date(
    ctx: typer.Context,
    date_from: Optional[str] = typer.Option(None, "--date-from", help="Start date (YYYY-MM-DD or unix timestamp)"),
    date_to: Optional[str] = typer.Option(None, "--date-to", help="End date (YYYY-MM-DD or unix timestamp)"),
    domain: Optional[str] = typer.Option(None, "--domain", help="Filter by domain name or ID"),
    group_by: Optional[str] = typer.Option(None, "--group-by", help="Group by: days, weeks, months, years"),
    tags: Optional[List[str]] = typer.Option(None, "--tags", help="Filter by tags"),
    event: Optional[List[str]] = typer.Option(None, "--event", help="Event types to retrieve (at least one)"),
) -> None:
    """Activity counts grouped by date.

    Examples:
        mailersend analytics date --date-from 2024-01-01 --date-to 2024-01-31 --event sent,delivered
    """
    events = split_csv(event)
    if not events:
        raise ValidationError(
            "missing required flag: --event\n\nExample:\n"
            "  mailersend analytics date --date-from 2024-01-01 --date-to 2024-01-31 --event sent,delivered"
        )
    start, end = default_date_range(date_from, date_to)

    client, formatter = get_client_and_formatter(ctx)
    domain_id = client.domain_resolver.resolve_id(domain) if domain else None

    result = client.get_analytics_by_date(
        start, end, events, domain_id=domain_id, group_by=group_by, tags=split_csv(tags),
    )
    if formatter.json_output:
        formatter.render_json(result)
        return

    stats = data_of(result).get("stats") or []
    headers = ["DATE"] + [e.upper() for e in events]
    rows = [[stat.get("date")] + [stat.get(e, 0) for e in events] for stat in stats]
    formatter.render_table(headers, rows)


def _opens(
    ctx: typer.Context,
    breakdown: str,
    name_header: str,
    date_from: Optional[str],
    date_to: Optional[str],
    domain: Optional[str],
    tags: Optional[List[str]],
) -> None:
    start, end = default_date_range(date_from, date_to)

    client, formatter = get_client_and_formatter(ctx)
    domain_id = client.domain_resolver.resolve_id(domain) if domain else None

    result = client.get_opens_by(breakdown, start, end, domain_id=domain_id, tags=split_csv(tags))
    if formatter.json_output:
        formatter.render_json(result)
        return

    stats = data_of(result).get("stats") or []
    rows = [[stat.get("name"), stat.get("count", 0)] for stat in stats]
    formatter.render_table([name_header, "COUNT"], rows)


@app.command()
@handle_exceptions
def country(
    ctx: typer.Context,
    date_from: Optional[str] = typer.Option(None, "--date-from", help="Start date (YYYY-MM-DD or unix timestamp)"),
    date_to: Optional[str] = typer.Option(None, "--date-to", help="End date (YYYY-MM-DD or unix timestamp)"),
    domain: Optional[str] = typer.Option(None, "--domain", help="Filter by domain name or ID"),
    tags: Optional[List[str]] = typer.Option(None, "--tags", help="Filter by tags"),
) -> None:
    """Opens grouped by country."""
    _opens(ctx, "country", "COUNTRY", date_from, date_to, domain, tags)


@app.command("ua-name")
@handle_exceptions
def ua_name(
    ctx: typer.Context,
    date_from: Optional[str] = typer.Option(None, "--date-from", help="Start date (YYYY-MM-DD or unix timestamp)"),
    date_to: Optional[str] = typer.Option(None, "--date-to", help="End date (YYYY-MM-DD or unix timestamp)"),
    domain: Optional[str] = typer.Option(None, "--domain", help="Filter by domain name or ID"),
    tags: Optional[List[str]] = typer.Option(None, "--tags", help="Filter by tags"),
) -> None:
    """Opens grouped by user agent name."""
    _opens(ctx, "ua-name", "USER AGENT", date_from, date_to, domain, tags)


@app.command("ua-type")
@handle_exceptions
def ua_type(
    ctx: typer.Context,
    date_from: Optional[str] = typer.Option(None, "--date-from", help="Start date (YYYY-MM-DD or unix timestamp)"),
    date_to: Optional[str] = typer.Option(None, "--date-to", help="End date (YYYY-MM-DD or unix timestamp)"),
    domain: Optional[str] = typer.Option(None, "--domain", help="Filter by domain name or ID"),
    tags: Optional[List[str]] = typer.Option(None, "--tags", help="Filter by tags"),
) -> None:
    """Opens grouped by reading environment (webmail, mobile, desktop)."""
    _opens(ctx, "ua-type", "TYPE", date_from, date_to, domain, tags)
