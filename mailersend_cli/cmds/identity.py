"""Sender identity commands for the MailerSend CLI.

Commands taking an identity accept either its ID or its sender email.
"""

from typing import Any, Dict, Optional

import typer

from ..render import data_of
from ..utils.cli_helpers import require_arg
from ..utils.client_factory import get_client_and_formatter
from ..app import handle_exceptions

app = typer.Typer()


def sender_options(
    reply_to_email: Optional[str],
    reply_to_name: Optional[str],
    add_note: Optional[bool],
    personal_note: Optional[str],
) -> Dict[str, Any]:
    body: Dict[str, Any] = {}
    if reply_to_email is not None:
        body["reply_to_email"] = reply_to_email
    if reply_to_name is not None:
        body["reply_to_name"] = reply_to_name
    if add_note is not None:
        body["add_note"] = add_note
    if personal_note is not None:
        body["personal_note"] = personal_note
    return body


@app.command("list")
@handle_exceptions
def list_identities(
    ctx: typer.Context,
    domain: Optional[str] = typer.Option(None, "--domain", help="Filter by domain name or ID"),
    limit: int = typer.Option(0, "--limit", help="Maximum number of identities to return (0 = all)"),
) -> None:
    """List sender identities."""
    client, formatter = get_client_and_formatter(ctx)

    domain_id = client.domain_resolver.resolve_id(domain) if domain else None
    identities = client.list_identities(domain_id=domain_id, limit=limit)

    rows = [[i.get("id"), i.get("name"), i.get("email")] for i in identities]
    formatter.output(identities, ["ID", "NAME", "EMAIL"], rows)


@app.command()
@handle_exceptions
def get(
    ctx: typer.Context,
    identity: str = typer.Argument(..., help="Identity ID or sender email"),
) -> None:
    """Get sender identity details."""
    client, formatter = get_client_and_formatter(ctx)

    result = client.get_identity(identity)
    if formatter.json_output:
        formatter.render_json(result)
        return

    d = data_of(result)
    formatter.render_detail([
        ["ID", d.get("id")],
        ["Name", d.get("name")],
        ["Email", d.get("email")],
        ["Reply-To Email", d.get("reply_to_email") or ""],
        ["Reply-To Name", d.get("reply_to_name") or ""],
        ["Personal Note", d.get("personal_note") or ""],
    ])


@app.command()
@handle_exceptions
def create(
    ctx: typer.Context,
    domain: Optional[str] = typer.Option(None, "--domain", help="Domain name or ID"),
    name: Optional[str] = typer.Option(None, "--name", help="Sender name"),
    email: Optional[str] = typer.Option(None, "--email", help="Sender email"),
    reply_to_email: Optional[str] = typer.Option(None, "--reply-to-email", help="Reply-to email"),
    reply_to_name: Optional[str] = typer.Option(None, "--reply-to-name", help="Reply-to name"),
    add_note: Optional[bool] = typer.Option(None, "--add-note/--no-add-note", help="Add a personal note"),
    personal_note: Optional[str] = typer.Option(None, "--personal-note", help="Personal note text"),
) -> None:
    """Create a sender identity.

    Examples:
        mailersend identity create --domain example.com --name "Support" --email support@example.com
    """
    domain = require_arg(domain, "domain", "Domain name or ID")
    name = require_arg(name, "name", "Sender name")
    email = require_arg(email, "email", "Sender email")

    client, formatter = get_client_and_formatter(ctx)
    domain_id = client.domain_resolver.resolve_id(domain)

    body: Dict[str, Any] = {"domain_id": domain_id, "name": name, "email": email}
    body.update(sender_options(reply_to_email, reply_to_name, add_note, personal_note))
    result = client.create_identity(body)

    if formatter.json_output:
        formatter.render_json(result)
        return
    formatter.success(f"Identity created successfully. ID: {data_of(result).get('id')}")


@app.command()
@handle_exceptions
def update(
    ctx: typer.Context,
    identity: str = typer.Argument(..., help="Identity ID or sender email"),
    name: Optional[str] = typer.Option(None, "--name", help="Sender name"),
    reply_to_email: Optional[str] = typer.Option(None, "--reply-to-email", help="Reply-to email"),
    reply_to_name: Optional[str] = typer.Option(None, "--reply-to-name", help="Reply-to name"),
    add_note: Optional[bool] = typer.Option(None, "--add-note/--no-add-note", help="Add a personal note"),
    personal_note: Optional[str] = typer.Option(None, "--personal-note", help="Personal note text"),
) -> None:
    """Update a sender identity. Only the options given are changed."""
    changes = sender_options(reply_to_email, reply_to_name, add_note, personal_note)
    if name is not None:
        changes["name"] = name

    client, formatter = get_client_and_formatter(ctx)
    result = client.update_identity(identity, changes)

    if formatter.json_output:
        formatter.render_json(result)
        return
    formatter.success(f"Identity {identity} updated successfully.")


@app.command()
@handle_exceptions
def delete(
    ctx: typer.Context,
    identity: str = typer.Argument(..., help="Identity ID or sender email"),
) -> None:
    """Delete a sender identity."""
    client, formatter = get_client_and_formatter(ctx)

    client.delete_identity(identity)
    formatter.success(f"Identity {identity} deleted successfully.")
