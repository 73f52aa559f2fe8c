"""Domain management commands for the MailerSend CLI.

This module provides commands for listing, creating, verifying and
deleting sending domains. Every command that takes a domain accepts either
its ID or its DNS name.
"""

from typing import Any, Dict, Optional

import typer

from ..exceptions import ValidationError
from ..render import check_mark, data_of, yes_no
from ..utils.cli_helpers import require_arg
from ..utils.client_factory import get_client_and_formatter
from ..app import handle_exceptions

app = typer.Typer()


@app.command("list")
@handle_exceptions
def list_domains(
    ctx: typer.Context,
    limit: int = typer.Option(0, "--limit", help="Maximum number of domains to return (0 = all)"),
    verified: Optional[bool] = typer.Option(
        None, "--verified/--unverified", help="Filter by verified status"
    ),
) -> None:
    """List domains.

    Examples:
        # All domains
        mailersend domain list

        # Verified domains only
        mailersend domain list --verified
    """
    client, formatter = get_client_and_formatter(ctx)

    domains = client.list_domains(limit=limit, verified=verified)

    rows = [
        [d.get("id"), d.get("name"), yes_no(d.get("is_verified")), yes_no(d.get("is_dns_active")), d.get("created_at")]
        for d in domains
    ]
    formatter.output(domains, ["ID", "NAME", "VERIFIED", "DNS ACTIVE", "CREATED"], rows)


@app.command()
@handle_exceptions
def get(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="Domain ID or name"),
) -> None:
    """Get domain details."""
    client, formatter = get_client_and_formatter(ctx)

    domain_id = client.domain_resolver.resolve_id(domain)
    result = client.get_domain(domain_id)
    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    formatter.render_detail([
        ["ID", d.get("id")],
        ["Name", d.get("name")],
        ["Verified", yes_no(d.get("is_verified"))],
        ["SPF", yes_no(d.get("spf"))],
        ["DKIM", yes_no(d.get("dkim"))],
        ["Tracking", yes_no(d.get("tracking"))],
        ["DNS Active", yes_no(d.get("is_dns_active"))],
        ["Created", d.get("created_at")],
        ["Updated", d.get("updated_at")],
    ])


@app.command()
@handle_exceptions
def add(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Domain name"),
    return_path_subdomain: Optional[str] = typer.Option(
        None, "--return-path-subdomain", help="Custom return path subdomain"
    ),
    custom_tracking_subdomain: Optional[str] = typer.Option(
        None, "--custom-tracking-subdomain", help="Custom tracking subdomain"
    ),
) -> None:
    """Add a new domain."""
    client, formatter = get_client_and_formatter(ctx)

    name = require_arg(name, "name", "Domain name")
    result = client.create_domain(name, return_path_subdomain, custom_tracking_subdomain)

    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    formatter.success(f"Domain created successfully: {d.get('name')} (ID: {d.get('id')})")


@app.command()
@handle_exceptions
def delete(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="Domain ID or name"),
) -> None:
    """Delete a domain."""
    client, formatter = get_client_and_formatter(ctx)

    domain_id = client.domain_resolver.resolve_id(domain)
    client.delete_domain(domain_id)
    formatter.success(f"Domain {domain} deleted successfully.")


@app.command("update-settings")
@handle_exceptions
def update_settings(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="Domain ID or name"),
    send_paused: Optional[bool] = typer.Option(None, "--send-paused/--no-send-paused", help="Pause sending"),
    track_clicks: Optional[bool] = typer.Option(None, "--track-clicks/--no-track-clicks", help="Track clicks"),
    track_opens: Optional[bool] = typer.Option(None, "--track-opens/--no-track-opens", help="Track opens"),
    track_unsubscribe: Optional[bool] = typer.Option(
        None, "--track-unsubscribe/--no-track-unsubscribe", help="Track unsubscribes"
    ),
    track_content: Optional[bool] = typer.Option(None, "--track-content/--no-track-content", help="Track content"),
    custom_tracking_enabled: Optional[bool] = typer.Option(
        None, "--custom-tracking-enabled/--no-custom-tracking-enabled", help="Enable custom tracking"
    ),
    custom_tracking_subdomain: Optional[str] = typer.Option(
        None, "--custom-tracking-subdomain", help="Custom tracking subdomain"
    ),
    precedence_bulk: Optional[bool] = typer.Option(
        None, "--precedence-bulk/--no-precedence-bulk", help="Set the precedence bulk header"
    ),
    ignore_duplicated_recipients: Optional[bool] = typer.Option(
        None, "--ignore-duplicated-recipients/--no-ignore-duplicated-recipients", help="Ignore duplicated recipients"
    ),
) -> None:
    """Update domain settings. Only the flags given are changed."""
    client, formatter = get_client_and_formatter(ctx)

    candidates: Dict[str, Any] = {
        "send_paused": send_paused,
        "track_clicks": track_clicks,
        "track_opens": track_opens,
        "track_unsubscribe": track_unsubscribe,
        "track_content": track_content,
        "custom_tracking_enabled": custom_tracking_enabled,
        "custom_tracking_subdomain": custom_tracking_subdomain,
        "precedence_bulk": precedence_bulk,
        "ignore_duplicated_recipients": ignore_duplicated_recipients,
    }
    settings = {key: value for key, value in candidates.items() if value is not None}
    if not settings:
        raise ValidationError("no settings flags provided; use --help to see available options")

    domain_id = client.domain_resolver.resolve_id(domain)
    result = client.update_domain_settings(domain_id, settings)

    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    formatter.success(f"Domain settings updated for {d.get('name')} (ID: {d.get('id')}).")


@app.command()
@handle_exceptions
def dns(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="Domain ID or name"),
) -> None:
    """Show the DNS records a domain needs."""
    client, formatter = get_client_and_formatter(ctx)

    domain_id = client.domain_resolver.resolve_id(domain)
    result = client.get_domain_dns(domain_id)
    if formatter.json_output:
        formatter.render_json(result)
        return

    records = data_of(result)
    rows = []
    for label, key in (
        ("SPF", "spf"),
        ("DKIM", "dkim"),
        ("Return Path", "return_path"),
        ("Custom Tracking", "custom_tracking"),
    ):
        record = records.get(key) or {}
        rows.append([label, record.get("hostname"), record.get("type"), record.get("value")])
    formatter.render_table(["RECORD", "HOSTNAME", "TYPE", "VALUE"], rows)


@app.command()
@handle_exceptions
def verify(
    ctx: typer.Context,
    domain: str = typer.Argument(..., help="Domain ID or name"),
) -> None:
    """Check the DNS records of a domain."""
    client, formatter = get_client_and_formatter(ctx)

    domain_id = client.domain_resolver.resolve_id(domain)
    result = client.verify_domain(domain_id)
    if formatter.json_output:
        formatter.render_json(result)
        return

    status = data_of(result)
    formatter.render_table(
        ["RECORD", "STATUS"],
        [
            ["DKIM", check_mark(status.get("dkim"))],
            ["SPF", check_mark(status.get("spf"))],
            ["MX", check_mark(status.get("mx"))],
            ["Tracking", check_mark(status.get("tracking"))],
            ["CNAME", check_mark(status.get("cname"))],
            ["Return Path CNAME", check_mark(status.get("rp_cname"))],
        ],
    )
