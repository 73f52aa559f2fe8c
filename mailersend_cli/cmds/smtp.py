"""SMTP user commands for the MailerSend CLI.

SMTP users belong to a domain, so every command needs ``--domain``.
"""

from typing import Any, Dict, Optional

import typer

from ..render import data_of, yes_no
from ..utils.cli_helpers import require_arg
from ..utils.client_factory import get_client_and_formatter
from ..app import handle_exceptions

app = typer.Typer()

DOMAIN_OPTION_HELP = "Domain name or ID"


@app.command("list")
@handle_exceptions
def list_smtp_users(
    ctx: typer.Context,
    domain: Optional[str] = typer.Option(None, "--domain", help=DOMAIN_OPTION_HELP),
    limit: int = typer.Option(0, "--limit", help="Maximum number of SMTP users to return (0 = all)"),
) -> None:
    """List the SMTP users of a domain."""
    domain = require_arg(domain, "domain", DOMAIN_OPTION_HELP)

    client, formatter = get_client_and_formatter(ctx)
    domain_id = client.domain_resolver.resolve_id(domain)
    users = client.list_smtp_users(domain_id, limit=limit)

    rows = [[u.get("id"), u.get("name"), yes_no(u.get("enabled"))] for u in users]
    formatter.output(users, ["ID", "NAME", "ENABLED"], rows)


@app.command()
@handle_exceptions
def get(
    ctx: typer.Context,
    smtp_user_id: str = typer.Argument(..., help="SMTP user ID"),
    domain: Optional[str] = typer.Option(None, "--domain", help=DOMAIN_OPTION_HELP),
) -> None:
    """Get SMTP user details."""
    domain = require_arg(domain, "domain", DOMAIN_OPTION_HELP)

    client, formatter = get_client_and_formatter(ctx)
    domain_id = client.domain_resolver.resolve_id(domain)
    result = client.get_smtp_user(domain_id, smtp_user_id)

    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    formatter.render_detail([
        ["ID", d.get("id")],
        ["Name", d.get("name")],
        ["Enabled", yes_no(d.get("enabled"))],
        ["Username", d.get("username")],
        ["Server", d.get("server")],
        ["Port", d.get("port")],
    ])


@app.command()
@handle_exceptions
def create(
    ctx: typer.Context,
    domain: Optional[str] = typer.Option(None, "--domain", help=DOMAIN_OPTION_HELP),
    name: Optional[str] = typer.Option(None, "--name", help="SMTP user name"),
    enabled: Optional[bool] = typer.Option(None, "--enabled/--disabled", help="Whether the SMTP user is enabled"),
) -> None:
    """Create an SMTP user."""
    domain = require_arg(domain, "domain", DOMAIN_OPTION_HELP)
    name = require_arg(name, "name", "SMTP user name")

    client, formatter = get_client_and_formatter(ctx)
    domain_id = client.domain_resolver.resolve_id(domain)
    result = client.create_smtp_user(domain_id, name, enabled=enabled)

    if formatter.json_output:
        formatter.render_json(result)
        return
    formatter.success(f"SMTP user created successfully. ID: {data_of(result).get('id')}")


@app.command()
@handle_exceptions
def update(
    ctx: typer.Context,
    smtp_user_id: str = typer.Argument(..., help="SMTP user ID"),
    domain: Optional[str] = typer.Option(None, "--domain", help=DOMAIN_OPTION_HELP),
    name: Optional[str] = typer.Option(None, "--name", help="SMTP user name"),
    enabled: Optional[bool] = typer.Option(None, "--enabled/--disabled", help="Whether the SMTP user is enabled"),
) -> None:
    """Update an SMTP user. Only the options given are changed."""
    domain = require_arg(domain, "domain", DOMAIN_OPTION_HELP)

    changes: Dict[str, Any] = {}
    if name is not None:
        changes["name"] = name
    if enabled is not None:
        changes["enabled"] = enabled

    client, formatter = get_client_and_formatter(ctx)
    domain_id = client.domain_resolver.resolve_id(domain)
    result = client.update_smtp_user(domain_id, smtp_user_id, changes)

    if formatter.json_output:
        formatter.render_json(result)
        return
    formatter.success(f"SMTP user {smtp_user_id} updated successfully.")


@app.command()
@handle_exceptions
def delete(
    ctx: typer.Context,
    smtp_user_id: str = typer.Argument(..., help="SMTP user ID"),
    domain: Optional[str] = typer.Option(None, "--domain", help=DOMAIN_OPTION_HELP),
) -> None:
    """Delete an SMTP user."""
    domain = require_arg(domain, "domain", DOMAIN_OPTION_HELP)

    client, formatter = get_client_and_formatter(ctx)
    domain_id = client.domain_resolver.resolve_id(domain)
    client.delete_smtp_user(domain_id, smtp_user_id)
    formatter.success(f"SMTP user {smtp_user_id} deleted successfully.")
